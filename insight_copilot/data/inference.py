"""Guess which columns of an uploaded dataset to plot."""
from __future__ import annotations
from numbers import Number
from typing import Any, Dict, NamedTuple, Sequence

__all__ = ["ChartKeys", "FALLBACK_KEYS", "infer_keys"]


class ChartKeys(NamedTuple):
    x_key: str
    y_key: str


FALLBACK_KEYS = ChartKeys("x", "y")


def _is_numeric(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def infer_keys(rows: Sequence[Dict[str, Any]]) -> ChartKeys:
    """Pick the category (x) and value (y) columns from the first row only.

    The last text field becomes x (default: first field); the last numeric
    field becomes y (default: second field, or the first if there is only
    one). This is a cheap default, not column-type inference.
    """
    if not rows or not rows[0]:
        return FALLBACK_KEYS
    fields = list(rows[0].items())
    x_key = fields[0][0]
    y_key = fields[1][0] if len(fields) > 1 else fields[0][0]
    for name, value in fields:
        if isinstance(value, str):
            x_key = name
        elif _is_numeric(value):
            y_key = name
    return ChartKeys(x_key, y_key)
