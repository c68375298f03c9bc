import random

from xls_browser.core.aggregation import (
    ColumnAggregate,
    compute_numeric_aggregates,
    compute_selection_aggregates,
    round_half_away,
)
from xls_browser.core.dataset import Dataset, DatasetMeta, DatasetPayload


def _dataset(headers, rows, dataset_id="d1"):
    meta = DatasetMeta(id=dataset_id, file_name=f"{dataset_id}.csv", row_count=len(rows))
    return Dataset(meta=meta, payload=DatasetPayload.build(headers, rows))


def test_text_column_is_excluded_and_numeric_strings_count():
    ds = _dataset(["Name", "Score"], [{"Name": "A", "Score": "10"}, {"Name": "B", "Score": 20}])

    agg = compute_numeric_aggregates(ds)

    assert agg.sum == [ColumnAggregate("Score", 30.0)]
    assert agg.average == [ColumnAggregate("Score", 15.0)]
    assert agg.numeric_columns == ["Score"]


def test_score_column_with_text_cell():
    ds = _dataset(["Score"], [{"Score": "10"}, {"Score": "20"}, {"Score": "abc"}])

    agg = compute_numeric_aggregates(ds)

    assert agg.sum == [ColumnAggregate("Score", 30.0)]
    assert agg.average == [ColumnAggregate("Score", 15.0)]


def test_non_numeric_cells_are_skipped_not_zeroed():
    ds = _dataset(
        ["x"],
        [{"x": "4"}, {"x": None}, {"x": "n/a"}, {}, {"x": ""}, {"x": 2}],
    )

    agg = compute_numeric_aggregates(ds)

    assert agg.sum == [ColumnAggregate("x", 6.0)]
    # two contributing cells, not six
    assert agg.average == [ColumnAggregate("x", 3.0)]


def test_columns_follow_header_order():
    ds = _dataset(
        ["b", "label", "a"],
        [{"a": 1, "b": 2, "label": "x"}, {"a": 3, "b": 4, "label": "y"}],
    )

    agg = compute_numeric_aggregates(ds)

    assert [c.column_name for c in agg.sum] == ["b", "a"]
    assert [c.column_name for c in agg.average] == ["b", "a"]


def test_average_is_rounded_from_the_unrounded_total():
    # total 0.008 rounds to 0.01 but the average 0.004 rounds to 0.0;
    # averaging the rounded sum would have given 0.005 -> 0.01
    ds = _dataset(["v"], [{"v": "0.004"}, {"v": "0.004"}])
    agg = compute_numeric_aggregates(ds)

    assert agg.sum == [ColumnAggregate("v", 0.01)]
    assert agg.average == [ColumnAggregate("v", 0.0)]


def test_empty_payload_and_missing_payload():
    empty = _dataset([], [])
    assert compute_numeric_aggregates(empty).sum == []

    unloaded = Dataset(meta=DatasetMeta(id="u", file_name="u.csv"))
    assert compute_numeric_aggregates(unloaded).average == []


def test_headers_without_rows_give_no_columns():
    ds = _dataset(["a", "b"], [])
    agg = compute_numeric_aggregates(ds)
    assert agg.sum == []
    assert agg.average == []


def test_aggregation_is_idempotent_and_order_independent():
    values = [0.1, 0.2, 0.3, 1e-3, 123.456, -7.25] * 5
    rows = [{"v": v} for v in values]
    shuffled = rows[:]
    random.Random(7).shuffle(shuffled)

    first = compute_numeric_aggregates(_dataset(["v"], rows))
    again = compute_numeric_aggregates(_dataset(["v"], rows))
    other_order = compute_numeric_aggregates(_dataset(["v"], shuffled))

    assert first == again
    assert first == other_order


def test_round_half_away_from_zero():
    assert round_half_away(1.005) == 1.01
    assert round_half_away(-2.675) == -2.68
    assert round_half_away(0.125) == 0.13
    assert round_half_away(2.5, places=0) == 3.0
    assert round_half_away(-0.001) == 0.0
    assert str(round_half_away(-0.001)) == "0.0"


def test_round_half_away_keeps_huge_values():
    big = float(2 ** 60)
    assert round_half_away(big) == big


def test_for_metric_and_selection_aggregates():
    d1 = _dataset(["n"], [{"n": 1}, {"n": 2}], dataset_id="d1")
    d2 = _dataset(["n"], [{"n": 5}], dataset_id="d2")

    result = compute_selection_aggregates([d2, d1])

    assert list(result) == ["d2", "d1"]
    assert result["d1"].for_metric("sum") == [ColumnAggregate("n", 3.0)]
    assert result["d1"].for_metric("average") == [ColumnAggregate("n", 1.5)]
