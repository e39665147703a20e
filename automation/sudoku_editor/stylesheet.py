"""Stylesheet synchronizer for the browser rendering of the grid.

Derives box separators and square, evenly-sized cells from the
box dimensions and the widths the host reports back:

  Pass 1 — analytic:  cell size from the container width, plus the
           two box-separator rules.
  Pass 2 — feedback:  font size and line height from the *rendered*
           cell width (borders shift the box model, so it is read back
           rather than predicted).
  Pass 3 — rows:      row width from the rendered width of the first
           row's leading cell, scaled to the full grid.

The synchronizer never touches a page itself.  Rules go into a
``LayoutStyle`` it is handed, and widths come from an injected
``Measurer``.
"""

from __future__ import annotations

import math
import re
from typing import Protocol

from . import _layout_sizes as sizes
from .models import BoxDimensions, LayoutMetrics

_RULE_RE = re.compile(r"^\s*[^{}\s][^{}]*\{[^{}]*\}\s*$")


class LayoutError(RuntimeError):
    """The box dimensions admit no grid geometry."""


def _px(value: float) -> str:
    """Format a pixel value without float noise (``42.300000000000004`` → ``42.3``)."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


# ── Owned rule container ─────────────────────────────────────


class LayoutStyle:
    """The one style sheet the layout engine writes to.

    Created once by the host and passed to whoever needs to clear or
    install rules.  Mirrors the CSSOM ``insertRule`` / ``deleteRule`` API.
    """

    def __init__(self) -> None:
        self._rules: list[str] = []

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def insert_rule(self, rule: str, index: int = 0) -> int:
        if not _RULE_RE.match(rule):
            raise ValueError(f"Not a single CSS rule: {rule!r}")
        if not 0 <= index <= len(self._rules):
            raise IndexError(f"Rule index {index} out of range")
        self._rules.insert(index, rule.strip())
        return index

    def delete_rule(self, index: int) -> None:
        if not 0 <= index < len(self._rules):
            raise IndexError(f"Rule index {index} out of range")
        del self._rules[index]

    def clear(self) -> None:
        while self._rules:
            self.delete_rule(0)

    def css_text(self) -> str:
        return "\n".join(self._rules)


# ── Host measurement capability ──────────────────────────────


class Measurer(Protocol):
    """Widths read back from the rendered grid, in CSS pixels."""

    async def container_width(self) -> float:
        """Content width of the ``#sudoku`` container."""
        ...

    async def cell_width(self) -> float:
        """Content width of a rendered ``.cell``."""
        ...

    async def row_width(self) -> float:
        """Border-box width of the first cell in ``#row0``."""
        ...


# ── Rule text ────────────────────────────────────────────────


def analytic_cell_width(container_width: float, per_row: int, per_column: int) -> int:
    if not per_row or not per_column:
        raise LayoutError(f"Cannot lay out {per_row}×{per_column} boxes")
    per_box = (container_width - sizes.CONTAINER_SLACK_PX) / per_row
    per_cell = (per_box - sizes.BOX_SLACK_PX) / per_column
    return math.floor(per_cell - sizes.CELL_SLACK_PX)


def vertical_separator_rule(per_row: int) -> str:
    return f".{sizes.CELL_CLASS}:nth-child({per_row}n) {{ border-right: {sizes.BOX_BORDER}; }}"


def horizontal_separator_rule(per_column: int) -> str:
    return (
        f"#{sizes.CONTAINER_ID} :nth-child({per_column}n) .{sizes.CELL_CLASS} "
        f"{{ border-bottom: {sizes.BOX_BORDER}; }}"
    )


def cell_rule(prop: str, value: float) -> str:
    return f".{sizes.CELL_CLASS} {{ {prop}: {_px(value)}px; }}"


def row_width_rule(width: float) -> str:
    return f"#{sizes.CONTAINER_ID} > div {{ width: {_px(width)}px; }}"


# ── Synchronizer ─────────────────────────────────────────────


class StyleSynchronizer:
    """Keeps a ``LayoutStyle`` in step with the grid's box dimensions."""

    def __init__(self, style: LayoutStyle, measurer: Measurer) -> None:
        self.style = style
        self.measurer = measurer

    def clear(self) -> None:
        self.style.clear()

    async def recompute(
        self, container_width: float, per_row: int, per_column: int,
    ) -> LayoutMetrics:
        """Install the full rule set for a *container_width* px container.

        Expects an empty style; ``refresh`` clears it first.
        """
        # Pass 1: geometry from the container width alone.
        width = analytic_cell_width(container_width, per_row, per_column)
        for rule in (
            vertical_separator_rule(per_row),
            horizontal_separator_rule(per_column),
            cell_rule("width", width),
            cell_rule("height", width),
        ):
            self.style.insert_rule(rule, 0)

        # Pass 2: read back what the browser actually made of it.
        actual = await self.measurer.cell_width()
        font_size = actual * sizes.FONT_SCALE
        self.style.insert_rule(cell_rule("font-size", font_size), 0)
        self.style.insert_rule(cell_rule("line-height", actual), 0)

        # Pass 3: NOTE the measured width is scaled by the whole grid size.
        measured_row = await self.measurer.row_width()
        row_width = measured_row * per_row * per_column
        self.style.insert_rule(row_width_rule(row_width), 0)

        return LayoutMetrics(
            container_width=container_width,
            cell_width=width,
            actual_cell_width=actual,
            font_size=font_size,
            line_height=actual,
            row_width=row_width,
        )

    async def refresh(self, dimensions: BoxDimensions) -> LayoutMetrics:
        """Clear, measure the container, then recompute."""
        self.clear()
        container = await self.measurer.container_width()
        return await self.recompute(container, dimensions.per_row, dimensions.per_column)
