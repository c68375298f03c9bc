import pytest

from xls_browser.core.dataset import (
    Dataset,
    DatasetMeta,
    DatasetPayload,
    catalog_from_records,
    parse_timestamp_ms,
)
from xls_browser.core.exceptions import DatasetSchemaError


def test_meta_from_store_record():
    meta = DatasetMeta.from_record(
        {
            "_id": "65f0c0ffee",
            "fileName": "sales.xlsx",
            "rowCount": 42,
            "createdAt": "2024-03-01T12:00:00.000Z",
            "displayName": "Sales Q1",
        }
    )

    assert meta.id == "65f0c0ffee"
    assert meta.row_count == 42
    assert meta.created_at == 1709294400000
    assert meta.label == "Sales Q1"
    assert meta.description is None


def test_label_falls_back_to_file_name():
    meta = DatasetMeta(id="x", file_name="raw.csv", display_name="   ")
    assert meta.label == "raw.csv"


def test_meta_requires_id():
    with pytest.raises(DatasetSchemaError):
        DatasetMeta.from_record({"fileName": "a.csv"})


def test_meta_rejects_bad_row_count():
    with pytest.raises(DatasetSchemaError):
        DatasetMeta.from_record({"_id": "a", "rowCount": "lots"})


def test_record_round_trip_keeps_fields():
    meta = DatasetMeta(id="a", file_name="a.csv", row_count=3, created_at=1709294400000, description="d")
    assert DatasetMeta.from_record(meta.to_record()) == meta


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 0),
        ("", 0),
        ("not a date", 0),
        (1234, 1234),
        ("1970-01-01T00:00:01Z", 1000),
        ("1970-01-01T00:00:02", 2000),
    ],
)
def test_parse_timestamp_ms(raw, expected):
    assert parse_timestamp_ms(raw) == expected


def test_payload_rejects_duplicate_headers():
    with pytest.raises(DatasetSchemaError):
        DatasetPayload.build(["a", "a"], [])


def test_payload_rejects_non_mapping_rows():
    with pytest.raises(DatasetSchemaError):
        DatasetPayload.build(["a"], [["1"]])


def test_payload_frame_keeps_header_order_and_missing_keys():
    payload = DatasetPayload.from_record({"headers": ["b", "a"], "data": [{"a": 1}, {"a": 2, "b": "x"}]})

    frame = payload.to_frame()

    assert list(frame.columns) == ["b", "a"]
    assert frame["a"].tolist() == [1, 2]


def test_dataset_without_payload():
    ds = Dataset(meta=DatasetMeta(id="a", file_name="a.csv", row_count=9))
    assert not ds.is_loaded
    assert ds.headers == ()
    assert ds.rows == ()
    assert ds.row_count == 9


def test_catalog_from_records_keeps_order():
    catalog = catalog_from_records([{"_id": "2", "fileName": "b"}, {"_id": "1", "fileName": "a"}])
    assert [m.id for m in catalog] == ["2", "1"]
