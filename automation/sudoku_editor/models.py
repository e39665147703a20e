"""Pydantic models for the sudoku editor.

Wire schema for the solving service plus the small value objects the
layout engine passes around.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Sparse cell state: "row,column" → digit.  Iteration order is insertion order.
GivensMap = dict[str, int]

DEFAULT_BOXES = 3


# ── Cell keys ────────────────────────────────────────────────


def cell_key(row: int, column: int) -> str:
    """Return the ``"row,column"`` key used by the grid widget."""
    return f"{row},{column}"


def parse_cell_key(key: str) -> tuple[int, int]:
    """Split a ``"row,column"`` key into integers.

    Raises ``ValueError`` for anything that is not two comma-separated ints.
    """
    parts = key.split(",")
    if len(parts) != 2:
        raise ValueError(f"Malformed cell key {key!r} — expected 'row,column'")
    return int(parts[0]), int(parts[1])


# ── Configuration ────────────────────────────────────────────


class BoxDimensions(BaseModel):
    """How many sub-grid boxes tile each axis."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    per_row: int = Field(default=DEFAULT_BOXES, alias="boxesPerRow")
    per_column: int = Field(default=DEFAULT_BOXES, alias="boxesPerColumn")

    @property
    def grid_size(self) -> int:
        return self.per_row * self.per_column


# ── Wire records ─────────────────────────────────────────────


class GivenRecord(BaseModel):
    """One filled cell, flat form used on the wire."""

    row: int
    column: int
    digit: int


class SolveRequest(BaseModel):
    """Body of ``POST /solve``."""

    model_config = ConfigDict(populate_by_name=True)

    givens: list[GivenRecord] = Field(default_factory=list)
    boxes_per_row: int = Field(alias="boxesPerRow")
    boxes_per_column: int = Field(alias="boxesPerColumn")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class SolveResponse(BaseModel):
    """Body returned by the solving service."""

    solution: Optional[list[GivenRecord]] = None


# ── Layout ───────────────────────────────────────────────────


class LayoutMetrics(BaseModel):
    """Pixel measurements derived by one stylesheet recompute."""

    container_width: float
    cell_width: int
    actual_cell_width: float
    font_size: float
    line_height: float
    row_width: float

    @property
    def overflows(self) -> bool:
        """True when the sized rows end up wider than their container."""
        return self.row_width > self.container_width
