"""Collapsible section policy.

A section is a title plus one child list. Its structure is edited only
through the generic engine applied to that list; the expanded/collapsed
flag is view state and never touches the document.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum

from .models import Block, CollapsibleContent


def new_collapsible_content(title: str = "") -> CollapsibleContent:
    return CollapsibleContent(title=title)


def set_title(content: CollapsibleContent, title: str) -> CollapsibleContent:
    return replace(content, title=title)


def set_blocks(content: CollapsibleContent, blocks: Sequence[Block]) -> CollapsibleContent:
    return replace(content, blocks=tuple(blocks))


def is_empty(content: CollapsibleContent) -> bool:
    """A section with neither title nor blocks renders nothing in view mode."""
    return not content.title and not content.blocks


def display_title(content: CollapsibleContent) -> str:
    return content.title or "Untitled Section"


class SectionState(str, Enum):
    EXPANDED = "expanded"
    COLLAPSED = "collapsed"


@dataclass
class SectionView:
    """Expand/collapse state of one rendered section. Starts expanded."""

    state: SectionState = SectionState.EXPANDED

    @property
    def is_expanded(self) -> bool:
        return self.state == SectionState.EXPANDED

    def toggle(self) -> SectionState:
        if self.state == SectionState.EXPANDED:
            self.state = SectionState.COLLAPSED
        else:
            self.state = SectionState.EXPANDED
        return self.state
