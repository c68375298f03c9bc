import pytest

from xls_browser.core.dataset import DatasetMeta, DatasetPayload
from xls_browser.core.exceptions import NotFound, UnsupportedFileType
from xls_browser.services.storage import LocalFileSystemStorage
from xls_browser.services.store import LocalCatalogStore


def _store(tmp_path):
    return LocalCatalogStore(LocalFileSystemStorage(tmp_path / "store"))


def _seed(store, dataset_id, created_at):
    meta = DatasetMeta(id=dataset_id, file_name=f"{dataset_id}.csv", row_count=1, created_at=created_at)
    store.add_dataset(meta, DatasetPayload.build(["x"], [{"x": "1"}]))
    return meta


def test_empty_store_lists_nothing(tmp_path):
    assert _store(tmp_path).fetch_catalog() == []


def test_catalog_is_newest_first_and_paged(tmp_path):
    store = _store(tmp_path)
    _seed(store, "old", 1_000)
    _seed(store, "new", 3_000)
    _seed(store, "mid", 2_000)

    assert [m.id for m in store.fetch_catalog()] == ["new", "mid", "old"]
    assert [m.id for m in store.fetch_catalog(page_size=1)] == ["new"]


def test_fetch_payload_and_delete(tmp_path):
    store = _store(tmp_path)
    _seed(store, "a", 1_000)

    payload = store.fetch_payload("a")
    assert payload.headers == ("x",)
    assert payload.rows == ({"x": "1"},)

    store.delete_dataset("a")
    assert store.fetch_catalog() == []
    with pytest.raises(NotFound):
        store.fetch_payload("a")
    with pytest.raises(NotFound):
        store.delete_dataset("a")


def test_upload_csv_keeps_cells_as_text(tmp_path):
    store = _store(tmp_path)
    content = b"Name,Score\nA,10\nB,\n"

    store.upload_dataset(content, "scores.csv", display_name=" Scores ", description="demo")

    (meta,) = store.fetch_catalog()
    assert meta.file_name == "scores.csv"
    assert meta.display_name == "Scores"
    assert meta.description == "demo"
    assert meta.row_count == 2
    assert meta.created_at > 0

    payload = store.fetch_payload(meta.id)
    assert payload.headers == ("Name", "Score")
    assert payload.rows == ({"Name": "A", "Score": "10"}, {"Name": "B", "Score": ""})


def test_upload_rejects_excel_locally(tmp_path):
    with pytest.raises(UnsupportedFileType):
        _store(tmp_path).upload_dataset(b"PK", "book.xlsx")


def test_storage_rejects_path_traversal(tmp_path):
    storage = LocalFileSystemStorage(tmp_path / "root")
    with pytest.raises(ValueError):
        storage.write_bytes("../escape.txt", b"x")


def test_storage_write_read_delete(tmp_path):
    storage = LocalFileSystemStorage(tmp_path / "root")
    storage.write_bytes("payloads/a.json", b"{}")

    assert storage.read_bytes("payloads/a.json") == b"{}"
    assert not (tmp_path / "root" / "payloads" / "a.json.tmp").exists()

    storage.delete("payloads/a.json")
    storage.delete("payloads/a.json")
    assert not storage.exists("payloads/a.json")
