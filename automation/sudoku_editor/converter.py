"""Conversion between the grid widget's sparse state and wire records."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .models import GivenRecord, GivensMap, cell_key, parse_cell_key


def to_records(givens: Mapping[str, int]) -> list[GivenRecord]:
    """One record per entry, in the mapping's iteration order."""
    records: list[GivenRecord] = []
    for key, digit in givens.items():
        row, column = parse_cell_key(key)
        records.append(GivenRecord(row=row, column=column, digit=digit))
    return records


def from_records(
    records: Iterable[GivenRecord | Mapping[str, Any]] | None,
) -> GivensMap | None:
    """Build a ``"row,column"`` → digit map from wire records.

    ``None`` means "not solved yet" and is passed through as ``None``; an
    empty sequence gives an empty map.
    """
    if records is None:
        return None

    givens: GivensMap = {}
    for rec in records:
        if not isinstance(rec, GivenRecord):
            rec = GivenRecord.model_validate(rec)
        givens[cell_key(rec.row, rec.column)] = rec.digit
    return givens


def prune_givens(givens: Mapping[str, int], grid_size: int) -> GivensMap:
    """Drop entries whose cell or digit no longer fits a *grid_size* grid."""
    kept: GivensMap = {}
    for key, digit in givens.items():
        try:
            row, column = parse_cell_key(key)
        except ValueError:
            continue
        if 0 <= row < grid_size and 0 <= column < grid_size and 1 <= digit <= grid_size:
            kept[key] = digit
    return kept
