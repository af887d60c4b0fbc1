"""Expandable entry list policy.

An expandable list is an ordered tuple of named entries, each owning a
child list. ``entries`` always holds the authored order. Alphabetical mode
is a derived presentation: entries are sorted case-insensitively and
grouped by first letter, with titles that do not start with A-Z collected
under ``#`` at the end. Switching modes never reorders ``entries``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from .ids import DEFAULT_ID_GENERATOR, IdGenerator
from .models import Block, Entry, ExpandableListContent, SortMode

logger = logging.getLogger(__name__)

OTHER_GROUP = "#"


@dataclass(frozen=True)
class EntryGroup:
    """Entries sharing a first letter in alphabetical view."""

    letter: str
    entries: tuple[Entry, ...]


def new_expandable_content(sort_mode: SortMode = SortMode.MANUAL) -> ExpandableListContent:
    return ExpandableListContent(sort_mode=sort_mode)


def find_entry(content: ExpandableListContent, entry_id: str) -> int:
    for i, entry in enumerate(content.entries):
        if entry.id == entry_id:
            return i
    return -1


# =============================================================================
# Entry operations
# =============================================================================


def add_entry(
    content: ExpandableListContent,
    ids: IdGenerator = DEFAULT_ID_GENERATOR,
    title: str = "",
) -> ExpandableListContent:
    """Append a new, empty entry."""
    entry = Entry(id=ids.new_id("entry"), title=title)
    return replace(content, entries=(*content.entries, entry))


def remove_entry(content: ExpandableListContent, entry_id: str) -> ExpandableListContent:
    """Drop an entry and everything in it."""
    if find_entry(content, entry_id) == -1:
        logger.debug("remove_entry ignored: %s not present", entry_id)
        return content
    return replace(content, entries=tuple(e for e in content.entries if e.id != entry_id))


def _update_entry(content: ExpandableListContent, entry_id: str, **changes) -> ExpandableListContent:
    index = find_entry(content, entry_id)
    if index == -1:
        logger.debug("entry update ignored: %s not present", entry_id)
        return content
    entries = list(content.entries)
    entries[index] = replace(entries[index], **changes)
    return replace(content, entries=tuple(entries))


def rename_entry(content: ExpandableListContent, entry_id: str, title: str) -> ExpandableListContent:
    return _update_entry(content, entry_id, title=title)


def set_entry_blocks(
    content: ExpandableListContent,
    entry_id: str,
    blocks: Sequence[Block],
) -> ExpandableListContent:
    return _update_entry(content, entry_id, blocks=tuple(blocks))


def move_entry(content: ExpandableListContent, entry_id: str, direction: int) -> ExpandableListContent:
    """Swap an entry with its neighbour above (-1) or below (+1).

    No-op at either boundary and for any other direction. The operation
    is valid in both sort modes; editors only expose it in manual mode
    (see can_reorder).
    """
    if direction not in (-1, 1):
        logger.debug("move_entry ignored: direction %s", direction)
        return content
    index = find_entry(content, entry_id)
    target = index + direction
    if index == -1 or not 0 <= target < len(content.entries):
        return content
    entries = list(content.entries)
    entries[index], entries[target] = entries[target], entries[index]
    return replace(content, entries=tuple(entries))


def set_sort_mode(content: ExpandableListContent, mode: SortMode | str) -> ExpandableListContent:
    return replace(content, sort_mode=SortMode(mode))


def toggle_sort_mode(content: ExpandableListContent) -> ExpandableListContent:
    if content.sort_mode == SortMode.MANUAL:
        return set_sort_mode(content, SortMode.ALPHABETICAL)
    return set_sort_mode(content, SortMode.MANUAL)


def can_reorder(content: ExpandableListContent) -> bool:
    """Manual move controls are only offered in manual mode."""
    return content.sort_mode == SortMode.MANUAL


# =============================================================================
# Views
# =============================================================================


def _group_letter(title: str) -> str:
    first = title[:1].upper()
    if "A" <= first <= "Z":
        return first
    return OTHER_GROUP


def alphabetical_groups(content: ExpandableListContent) -> list[EntryGroup]:
    """Entries sorted case-insensitively and bucketed by first letter."""
    ordered = sorted(content.entries, key=lambda e: e.title.casefold())
    groups: dict[str, list[Entry]] = {}
    for entry in ordered:
        groups.setdefault(_group_letter(entry.title), []).append(entry)
    letters = sorted(groups, key=lambda letter: (letter == OTHER_GROUP, letter))
    return [EntryGroup(letter=letter, entries=tuple(groups[letter])) for letter in letters]


def view_entries(content: ExpandableListContent) -> tuple[Entry, ...]:
    """Entries in the order they are rendered for the current sort mode."""
    if content.sort_mode == SortMode.ALPHABETICAL:
        return tuple(e for group in alphabetical_groups(content) for e in group.entries)
    return content.entries


@dataclass
class Accordion:
    """View state: at most one expanded entry at a time."""

    expanded_id: str | None = None

    def select(self, entry_id: str) -> str | None:
        """Expand ``entry_id``, or collapse it if it is already expanded."""
        if self.expanded_id == entry_id:
            self.expanded_id = None
        else:
            self.expanded_id = entry_id
        return self.expanded_id

    def is_expanded(self, entry_id: str) -> bool:
        return self.expanded_id == entry_id

    def forget(self, entry_id: str) -> None:
        """Drop the expanded marker when its entry is removed."""
        if self.expanded_id == entry_id:
            self.expanded_id = None
