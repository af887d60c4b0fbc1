"""Identity generation for blocks, columns and entries.

Ids must be unique across the whole document tree, not just within one
list, and are never reused after deletion. Every operation that creates a
node takes an IdGenerator so there is exactly one authoritative source.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from typing import Protocol
from uuid import uuid4


class IdGenerator(Protocol):
    """Anything that can hand out fresh identifiers."""

    def new_id(self, prefix: str = "block") -> str:
        ...


class UuidIdGenerator:
    """Random ids of the form ``<prefix>-<12 hex chars>``."""

    def new_id(self, prefix: str = "block") -> str:
        return f"{prefix}-{uuid4().hex[:12]}"


class SequentialIdGenerator:
    """Deterministic ids of the form ``<prefix>-<n>``.

    Ids already present in a loaded document can be reserved so they are
    never handed out again.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._reserved: set[str] = set()

    def reserve(self, ids: Iterable[str]) -> None:
        """Mark existing ids as taken."""
        self._reserved.update(ids)

    def new_id(self, prefix: str = "block") -> str:
        while True:
            candidate = f"{prefix}-{next(self._counter)}"
            if candidate not in self._reserved:
                self._reserved.add(candidate)
                return candidate


DEFAULT_ID_GENERATOR: IdGenerator = UuidIdGenerator()
