"""ListPath - addresses one child list inside a block tree.

A path is a sequence of steps from the top-level list downwards. Each step
names a container block and, where the container owns several lists,
which one:
- Columns block: slot is the column index (int)
- Expandable entry list: slot is the entry id (str)
- Collapsible section: slot is None (it owns a single list)

The empty path addresses the top-level document list.

Example:
    path = ListPath.root().child("cols-1", 0).child("section-7")
    print(path)          # "cols-1[0]/section-7"
    path.to_list()       # [{"block": "cols-1", "slot": 0}, {"block": "section-7", "slot": None}]
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import ValidationError

Slot = int | str | None


@dataclass(frozen=True)
class PathStep:
    """One hop: a container block id plus the list it selects."""

    block_id: str
    slot: Slot = None

    def __str__(self) -> str:
        if self.slot is None:
            return self.block_id
        return f"{self.block_id}[{self.slot}]"


@dataclass(frozen=True)
class ListPath:
    """Immutable address of a child list."""

    steps: tuple[PathStep, ...] = ()

    @classmethod
    def root(cls) -> ListPath:
        return cls(())

    @classmethod
    def of(cls, *steps: PathStep | tuple[str, Slot] | str) -> ListPath:
        """Build a path from steps, ``(block_id, slot)`` pairs or bare ids."""
        return cls(tuple(_coerce_step(s) for s in steps))

    def child(self, block_id: str, slot: Slot = None) -> ListPath:
        return ListPath((*self.steps, PathStep(block_id, slot)))

    @property
    def parent(self) -> ListPath:
        return ListPath(self.steps[:-1])

    @property
    def is_root(self) -> bool:
        return not self.steps

    @property
    def depth(self) -> int:
        return len(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[PathStep]:
        return iter(self.steps)

    def __str__(self) -> str:
        return "/".join(str(s) for s in self.steps)

    def to_list(self) -> list[dict[str, Any]]:
        """Convert to the JSON shape used by operation requests."""
        return [{"block": s.block_id, "slot": s.slot} for s in self.steps]

    @classmethod
    def from_list(cls, data: Sequence[Any] | None) -> ListPath:
        """Parse the JSON shape produced by to_list.

        Also accepts ``[block_id, slot]`` pairs and bare block ids.

        Raises:
            ValidationError: If a step cannot be interpreted.
        """
        if data is None:
            return cls.root()
        if isinstance(data, ListPath):
            return data
        if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
            raise ValidationError("Path must be a list of steps", field="path", value=data)
        return cls(tuple(_coerce_step(s) for s in data))


def _coerce_step(step: Any) -> PathStep:
    if isinstance(step, PathStep):
        return step
    if isinstance(step, str):
        return PathStep(step)
    if isinstance(step, dict) and step.get("block"):
        return PathStep(str(step["block"]), step.get("slot"))
    if isinstance(step, (list, tuple)) and len(step) == 2 and isinstance(step[0], str):
        return PathStep(step[0], step[1])
    raise ValidationError("Invalid path step", field="path", value=step)
