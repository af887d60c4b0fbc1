from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str) -> Path | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    """Runtime settings for logging and id generation.

    Nothing here changes document semantics; structural limits live in
    kbblocks.config.
    """

    log_level: str = os.environ.get("KBBLOCKS_LOG_LEVEL", "WARNING")
    log_path: Path | None = _env_path("KBBLOCKS_LOG_PATH")
    log_max_bytes: int = _env_int("KBBLOCKS_LOG_MAX_BYTES", 1_000_000)
    log_backup_count: int = _env_int("KBBLOCKS_LOG_BACKUP_COUNT", 3)

    # Prefix for generated block ids ("block-3f2a9c...")
    id_prefix: str = os.environ.get("KBBLOCKS_ID_PREFIX", "block")


settings = Settings()
