from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence

import pytest

from kbblocks.columns import renormalize
from kbblocks.ids import SequentialIdGenerator
from kbblocks.models import (
    Block,
    BlockType,
    CollapsibleContent,
    Column,
    ColumnsContent,
    Entry,
    ExpandableListContent,
    SortMode,
)


def paragraph(block_id: str, text: str | None = None) -> Block:
    return Block(id=block_id, type=BlockType.PARAGRAPH, content=block_id if text is None else text)


def columns_block(
    block_id: str,
    layout: Sequence[Sequence[str]],
    widths: Sequence[int] | None = None,
) -> Block:
    """Columns block whose columns hold paragraphs with the given ids."""
    cols = [
        Column(id=f"{block_id}-c{i}", width=0, blocks=tuple(paragraph(b) for b in child_ids))
        for i, child_ids in enumerate(layout)
    ]
    if widths is None:
        built = renormalize(cols)
    else:
        built = tuple(Column(id=c.id, width=w, blocks=c.blocks) for c, w in zip(cols, widths))
    return Block(id=block_id, type=BlockType.COLUMNS, content=ColumnsContent(columns=built))


def section_block(block_id: str, title: str, blocks: Sequence[Block] = ()) -> Block:
    return Block(
        id=block_id,
        type=BlockType.COLLAPSIBLE_HEADING,
        content=CollapsibleContent(title=title, blocks=tuple(blocks)),
    )


def entry_list_block(
    block_id: str,
    entries: Sequence[tuple[str, str, Sequence[Block]]],
    sort_mode: SortMode = SortMode.MANUAL,
) -> Block:
    return Block(
        id=block_id,
        type=BlockType.EXPANDABLE_CONTENT_LIST,
        content=ExpandableListContent(
            entries=tuple(Entry(id=eid, title=title, blocks=tuple(blocks)) for eid, title, blocks in entries),
            sort_mode=sort_mode,
        ),
    )


def ids_of(blocks: Sequence[Block]) -> list[str]:
    return [b.id for b in blocks]


@pytest.fixture
def ids() -> SequentialIdGenerator:
    """Deterministic id generator: block-1, col-2, entry-3, ..."""
    return SequentialIdGenerator()


@pytest.fixture
def make_paragraph() -> Callable[..., Block]:
    return paragraph


@pytest.fixture
def make_columns() -> Callable[..., Block]:
    return columns_block


@pytest.fixture
def sample_tree() -> tuple[Block, ...]:
    """A document that nests every container kind.

    intro
    cols        [a, b] | [c]
    section     "Details": s1, inner-cols [x] | [y]
    faq         e1 "Beta": q1 / e2 "alpha": q2
    outro
    """
    return (
        paragraph("intro"),
        columns_block("cols", [["a", "b"], ["c"]]),
        section_block("section", "Details", [
            paragraph("s1"),
            columns_block("inner-cols", [["x"], ["y"]]),
        ]),
        entry_list_block("faq", [
            ("e1", "Beta", [paragraph("q1")]),
            ("e2", "alpha", [paragraph("q2")]),
        ]),
        paragraph("outro"),
    )


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep handlers installed by configure_logging from leaking between tests."""
    import kbblocks.logging_setup as logging_setup

    monkeypatch.setattr(logging_setup, "_configured", False)
    yield
    logger = logging.getLogger("kbblocks")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
