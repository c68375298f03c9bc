from __future__ import annotations

import math
import numbers
import re
from enum import Enum
from typing import Any, Mapping, Optional

import numpy as np

# Plain decimal: optional sign, digits with optional fraction (or a bare
# fraction), surrounding whitespace allowed. No exponents, no thousands
# separators, no inf/nan spellings.
_DECIMAL_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)\s*$")

_MISSING = object()


class CellKind(str, Enum):
    """
    What a single row value looks like once it reaches the engine.

    Rows come from parsed spreadsheets/CSV and carry whatever the store
    serialised: strings, numbers, nulls, or nothing at all for that header.
    """
    ABSENT = "absent"
    NULL = "null"
    NUMERIC_STRING = "numeric_string"
    TEXT = "text"
    NUMBER = "number"


def _is_number(value: Any) -> bool:
    # bool is an int subclass but a spreadsheet TRUE is not a quantity
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def classify_cell(value: Any = _MISSING) -> CellKind:
    """Classify a raw cell. Call with no argument to classify a missing key."""
    if value is _MISSING:
        return CellKind.ABSENT
    if value is None:
        return CellKind.NULL
    if _is_number(value):
        return CellKind.NUMBER
    if isinstance(value, str) and _DECIMAL_RE.match(value):
        return CellKind.NUMERIC_STRING
    return CellKind.TEXT


def coerce_numeric(value: Any = _MISSING) -> Optional[float]:
    """
    The single numeric-parse rule used everywhere in the app.

    Returns the value as a float, or None when the cell does not contribute
    to numeric aggregation (absent, null, text, empty string, booleans,
    NaN/inf).
    """
    kind = classify_cell(value)

    if kind is CellKind.NUMBER:
        number = float(value)
        return number if math.isfinite(number) else None

    if kind is CellKind.NUMERIC_STRING:
        return float(value.strip())

    return None


def row_cell(row: Mapping[str, Any], header: str) -> Optional[float]:
    """Coerce the value stored under ``header`` in ``row`` (missing keys included)."""
    if header not in row:
        return coerce_numeric()
    return coerce_numeric(row[header])


def coerce_or_nan(value: Any) -> float:
    """Vectorisation helper for pandas: non-contributing cells become NaN."""
    number = coerce_numeric(value)
    return np.nan if number is None else number
