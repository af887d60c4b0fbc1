"""Centralized structural constants for kb-blocks.

This module provides a single source of truth for:
- Column cardinality limits (2..5 columns per Columns block)
- Column width limits used by the width slider
- Built-in layout presets

Values are hard limits of the document model; they are not read from the
environment because documents must stay portable between installations.
"""

from __future__ import annotations

from dataclasses import dataclass


# =============================================================================
# Column Limits
# =============================================================================


@dataclass(frozen=True)
class ColumnLimits:
    """Cardinality and width bounds for Columns content.

    Widths are integer percentages that always sum to TOTAL_WIDTH.
    """

    MIN_COLUMNS: int = 2
    MAX_COLUMNS: int = 5
    TOTAL_WIDTH: int = 100

    # Slider bounds for a single column
    MIN_WIDTH: int = 15
    MAX_WIDTH: int = 85


COLUMN_LIMITS = ColumnLimits()


# =============================================================================
# Layout Presets
# =============================================================================


@dataclass(frozen=True)
class LayoutPreset:
    """A named set of column widths offered by the editor."""

    label: str
    widths: tuple[int, ...]


LAYOUT_PRESETS: tuple[LayoutPreset, ...] = (
    LayoutPreset("50/50", (50, 50)),
    LayoutPreset("33/33/33", (33, 34, 33)),
    LayoutPreset("70/30", (70, 30)),
    LayoutPreset("30/70", (30, 70)),
    LayoutPreset("25/50/25", (25, 50, 25)),
    LayoutPreset("25/25/25/25", (25, 25, 25, 25)),
)


def get_preset(label: str) -> LayoutPreset | None:
    """Look up a layout preset by its label."""
    for preset in LAYOUT_PRESETS:
        if preset.label == label:
            return preset
    return None
