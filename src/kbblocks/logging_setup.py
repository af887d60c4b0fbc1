"""Logging configuration for kb-blocks.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed here, once, by applications (the CLI, a host editor service).
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .errors import ConfigurationError
from .settings import Settings, settings as default_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(
    cfg: Settings | None = None,
    *,
    level: str | None = None,
    log_path: Path | None = None,
    force: bool = False,
) -> logging.Logger:
    """Install handlers on the ``kbblocks`` logger.

    Args:
        cfg: Settings to read defaults from (module settings if None).
        level: Override for the log level name.
        log_path: Override for the rotating log file location.
        force: Reconfigure even if handlers were already installed.

    Returns:
        The configured package logger.

    Raises:
        ConfigurationError: If the level name is not a logging level.
    """
    global _configured

    cfg = cfg or default_settings
    root = logging.getLogger("kbblocks")
    if _configured and not force:
        return root

    level_name = (level or cfg.log_level).upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        raise ConfigurationError(f"Unknown log level: {level_name}", setting="log_level")

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    path = log_path or cfg.log_path
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=cfg.log_max_bytes,
            backupCount=cfg.log_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.setLevel(numeric)
    root.propagate = False
    _configured = True
    return root
