from unittest import mock

import pytest
import requests

from xls_browser.core.exceptions import (
    DatasetSchemaError,
    Forbidden,
    NotFound,
    StoreRejected,
    TransientFetchError,
    XlsBrowserError,
)
from xls_browser.core.roles import Role
from xls_browser.services.dataset_service import DatasetRegistry
from xls_browser.services.store import HttpCatalogStore


def _response(status=200, body=None):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status
    response.reason = "reason"
    response.text = ""
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


def _store(response=None, error=None):
    session = mock.Mock(spec=requests.Session)
    session.headers = {}
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = response
    return HttpCatalogStore("https://api.example.com/", token="t0k", timeout=5, session=session), session


def test_session_carries_bearer_token():
    _, session = _store(_response(body={"data": {}}))
    assert session.headers["Authorization"] == "Bearer t0k"
    assert session.headers["Accept"] == "application/json"


def test_fetch_catalog():
    body = {
        "data": {
            "excelFiles": [
                {"_id": "1", "fileName": "a.xlsx", "rowCount": 3, "createdAt": "2024-01-01T00:00:00Z"},
            ]
        }
    }
    store, session = _store(_response(body=body))

    catalog = store.fetch_catalog(page_size=25)

    assert [m.id for m in catalog] == ["1"]
    session.request.assert_called_once_with(
        "GET", "https://api.example.com/excel", timeout=5, params={"limit": 25},
    )


def test_fetch_payload():
    body = {"data": {"_id": "1", "headers": ["a"], "data": [{"a": "2"}]}}
    store, session = _store(_response(body=body))

    payload = store.fetch_payload("1")

    assert payload.headers == ("a",)
    assert session.request.call_args[0] == ("GET", "https://api.example.com/excel/1")


def test_404_is_not_found():
    store, _ = _store(_response(404, {"message": "gone"}))
    with pytest.raises(NotFound) as exc:
        store.fetch_payload("1")
    assert exc.value.dataset_id == "1"


@pytest.mark.parametrize("status", [401, 403])
def test_auth_errors_are_forbidden(status):
    store, _ = _store(_response(status, {"message": "nope"}))
    with pytest.raises(Forbidden):
        store.delete_dataset("1")


@pytest.mark.parametrize("status", [400, 413, 422])
def test_other_client_errors_are_rejections_with_store_message(status):
    store, _ = _store(_response(status, {"message": "File too large"}))
    registry = DatasetRegistry(store)

    with pytest.raises(StoreRejected) as exc:
        registry.upload(b"a,b\n1,2\n", "x.csv", role=Role.ADMIN)

    assert isinstance(exc.value, XlsBrowserError)
    assert exc.value.status_code == status
    assert str(exc.value) == "File too large"


@pytest.mark.parametrize("status", [500, 503, 429])
def test_server_errors_are_transient(status):
    store, _ = _store(_response(status))
    with pytest.raises(TransientFetchError):
        store.fetch_payload("1")


def test_network_error_is_transient():
    store, _ = _store(error=requests.exceptions.ConnectionError("down"))
    with pytest.raises(TransientFetchError):
        store.fetch_catalog()


def test_response_without_data_is_schema_error():
    store, _ = _store(_response(body={"ok": True}))
    with pytest.raises(DatasetSchemaError):
        store.fetch_catalog()


def test_upload_posts_multipart_form():
    store, session = _store(_response(201, {"data": {}}))

    store.upload_dataset(b"a,b\n1,2\n", "n.csv", display_name=" Name ", description="desc")

    method, url = session.request.call_args[0]
    kwargs = session.request.call_args[1]
    assert (method, url) == ("POST", "https://api.example.com/excel/upload")
    assert kwargs["files"] == {"file": ("n.csv", b"a,b\n1,2\n", "text/csv")}
    assert kwargs["data"] == {"displayName": "Name", "description": "desc"}


def test_dataset_id_is_quoted_in_path():
    store, session = _store(_response(200, {"data": {"headers": [], "data": []}}))

    store.fetch_payload("a/b?c")
    store.delete_dataset("a/b?c")

    urls = [call[0][1] for call in session.request.call_args_list]
    assert urls == ["https://api.example.com/excel/a%2Fb%3Fc"] * 2
