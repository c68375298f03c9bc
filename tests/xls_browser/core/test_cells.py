import math

import numpy as np
import pytest

from xls_browser.core.cells import CellKind, classify_cell, coerce_numeric, coerce_or_nan, row_cell


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, CellKind.NULL),
        (3, CellKind.NUMBER),
        (2.5, CellKind.NUMBER),
        (np.int64(4), CellKind.NUMBER),
        ("12", CellKind.NUMERIC_STRING),
        ("  -3.5 ", CellKind.NUMERIC_STRING),
        (".5", CellKind.NUMERIC_STRING),
        ("abc", CellKind.TEXT),
        ("", CellKind.TEXT),
        ("1e3", CellKind.TEXT),
        ("1,000", CellKind.TEXT),
        (True, CellKind.TEXT),
        (np.bool_(False), CellKind.TEXT),
    ],
)
def test_classify_cell(value, expected):
    assert classify_cell(value) is expected


def test_classify_missing_key_is_absent():
    assert classify_cell() is CellKind.ABSENT


def test_coerce_numeric_parses_strings_and_numbers():
    assert coerce_numeric("10") == 10.0
    assert coerce_numeric(" 2.50 ") == 2.5
    assert coerce_numeric("+7") == 7.0
    assert coerce_numeric(20) == 20.0


@pytest.mark.parametrize("value", [None, "", "N/A", "inf", "nan", True, float("nan"), float("inf")])
def test_coerce_numeric_rejects_non_contributing_cells(value):
    assert coerce_numeric(value) is None


def test_row_cell_handles_missing_key():
    row = {"a": "1"}
    assert row_cell(row, "a") == 1.0
    assert row_cell(row, "b") is None


def test_coerce_or_nan():
    assert coerce_or_nan("3") == 3.0
    assert math.isnan(coerce_or_nan("x"))
