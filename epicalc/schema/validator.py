"""Caller-side validation of raw calculator inputs."""

from __future__ import annotations

import math
from typing import Any, Mapping

from epicalc.schema.base import ContingencyTable, StudyDesign, StudyGoal

CELL_NAMES: tuple[str, ...] = ("a", "b", "c", "d")


class InvalidCellCountError(ValueError):
    """A cell count is missing, not an integer, negative or too large for a float."""

    def __init__(self, cell: str, value: Any = None):
        self.cell = cell
        self.value = value
        super().__init__(
            f"Cell '{cell}' must be a non-negative whole number (got {value!r})."
        )


def _fits_float(count: int) -> bool:
    try:
        return math.isfinite(float(count))
    except OverflowError:
        return False


def _parse_count(cell: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidCellCountError(cell, value)
    if isinstance(value, int):
        count = value
    elif isinstance(value, float) and value.is_integer():
        count = int(value)
    elif isinstance(value, str):
        try:
            count = int(value.strip(), 10)
        except ValueError:
            raise InvalidCellCountError(cell, value) from None
    else:
        raise InvalidCellCountError(cell, value)
    if count < 0 or not _fits_float(count):
        raise InvalidCellCountError(cell, value)
    return count


def parse_table(inputs: Mapping[str, Any]) -> ContingencyTable:
    """Build a ContingencyTable from raw form-style inputs.

    Cells are checked in ``a, b, c, d`` order and the first bad one is
    reported. Numeric strings such as ``"20"`` are accepted.
    """
    counts = {cell: _parse_count(cell, inputs.get(cell)) for cell in CELL_NAMES}
    return ContingencyTable(**counts)


def coerce_design(value: StudyDesign | str) -> StudyDesign:
    """Return *value* as a StudyDesign, raising ValueError for unknown names."""
    try:
        return StudyDesign(value)
    except ValueError:
        allowed = ", ".join(d.value for d in StudyDesign)
        raise ValueError(f"Unknown study design {value!r}. Expected one of: {allowed}.") from None


def coerce_goal(value: StudyGoal | str) -> StudyGoal:
    """Return *value* as a StudyGoal, raising ValueError for unknown names."""
    try:
        return StudyGoal(value)
    except ValueError:
        allowed = ", ".join(g.value for g in StudyGoal)
        raise ValueError(f"Unknown study goal {value!r}. Expected one of: {allowed}.") from None
