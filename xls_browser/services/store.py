from __future__ import annotations

import io
import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any, Dict, List, Optional

import pandas as pd
import requests
from requests.utils import quote

from xls_browser.core.dataset import DatasetMeta, DatasetPayload, catalog_from_records
from xls_browser.core.exceptions import (
    DatasetSchemaError,
    Forbidden,
    NotFound,
    StoreRejected,
    TransientFetchError,
    UnsupportedFileType,
)
from xls_browser.config.model import StoreConfig
from xls_browser.services.storage import LocalFileSystemStorage, StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0


class CatalogStore(ABC):
    """
    Abstract interface for the remote dataset store.

    The store owns parsing and persistence of uploads; the browser only
    lists, fetches and deletes parsed datasets.
    """

    @abstractmethod
    def fetch_catalog(self, page_size: int = DEFAULT_PAGE_SIZE) -> List[DatasetMeta]:
        """Return dataset metadata, newest first as the store orders it."""
        pass

    @abstractmethod
    def fetch_payload(self, dataset_id: str) -> DatasetPayload:
        """Return headers + rows. Raises NotFound / TransientFetchError."""
        pass

    @abstractmethod
    def delete_dataset(self, dataset_id: str) -> None:
        """Raises NotFound / Forbidden / TransientFetchError."""
        pass

    @abstractmethod
    def upload_dataset(
            self,
            content: bytes,
            file_name: str,
            *,
            display_name: Optional[str] = None,
            description: Optional[str] = None,
    ) -> None:
        pass


# -------------------------------------------------------------------------
# HTTP store (the production backend)
# -------------------------------------------------------------------------

class HttpCatalogStore(CatalogStore):
    """
    Client for the dataset store's JSON API.

        GET    /excel?limit=N     -> {"data": {"excelFiles": [...]}}
        GET    /excel/{id}        -> {"data": {..., "headers": [...], "data": [...]}}
        DELETE /excel/{id}
        POST   /excel/upload      multipart: file, displayName, description
    """

    def __init__(
            self,
            base_url: str,
            *,
            token: Optional[str] = None,
            timeout: float = DEFAULT_TIMEOUT,
            session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers["Accept"] = "application/json"
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP {response.status_code}"

    def _request(self, method: str, path: str, *, dataset_id: Optional[str] = None, **kwargs) -> requests.Response:
        url = self._url(path)
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning(
                "Store request failed",
                extra={"method": method, "url": url, "error": str(e)},
            )
            raise TransientFetchError(dataset_id, f"Could not reach the dataset store: {e}") from e

        status = response.status_code
        if status == 404:
            raise NotFound(dataset_id or "", self._error_message(response))
        if status in (401, 403):
            raise Forbidden(self._error_message(response))
        if status >= 500 or status == 429:
            raise TransientFetchError(dataset_id, f"Dataset store error: {self._error_message(response)}")
        if status >= 400:
            raise StoreRejected(status, self._error_message(response))
        return response

    @staticmethod
    def _data(response: requests.Response, dataset_id: Optional[str] = None) -> Any:
        try:
            body = response.json()
        except ValueError as e:
            raise TransientFetchError(dataset_id, "Dataset store returned invalid JSON") from e
        if not isinstance(body, dict) or "data" not in body:
            raise DatasetSchemaError("Dataset store response has no 'data' field")
        return body["data"]

    def fetch_catalog(self, page_size: int = DEFAULT_PAGE_SIZE) -> List[DatasetMeta]:
        response = self._request("GET", "/excel", params={"limit": page_size})
        data = self._data(response)
        records = data.get("excelFiles", []) if isinstance(data, dict) else []
        return catalog_from_records(records)

    def fetch_payload(self, dataset_id: str) -> DatasetPayload:
        response = self._request("GET", f"/excel/{quote(dataset_id, safe='')}", dataset_id=dataset_id)
        data = self._data(response, dataset_id)
        if not isinstance(data, dict):
            raise DatasetSchemaError(f"Dataset '{dataset_id}' payload is not an object")
        return DatasetPayload.from_record(data)

    def delete_dataset(self, dataset_id: str) -> None:
        self._request("DELETE", f"/excel/{quote(dataset_id, safe='')}", dataset_id=dataset_id)

    def upload_dataset(
            self,
            content: bytes,
            file_name: str,
            *,
            display_name: Optional[str] = None,
            description: Optional[str] = None,
    ) -> None:
        form: Dict[str, str] = {}
        if description:
            form["description"] = description
        if display_name and display_name.strip():
            form["displayName"] = display_name.strip()

        self._request(
            "POST",
            "/excel/upload",
            files={"file": (file_name, content, guess_content_type(file_name))},
            data=form,
        )


# -------------------------------------------------------------------------
# Local store (offline / development backend)
# -------------------------------------------------------------------------

CATALOG_PATH = "catalog.json"


def _payload_path(dataset_id: str) -> str:
    return f"payloads/{dataset_id}.json"


class LocalCatalogStore(CatalogStore):
    """
    Dataset store kept as JSON documents on a StorageBackend.

        catalog.json             list of catalog records (store wire format)
        payloads/<id>.json       {"headers": [...], "data": [...]}

    Uploads are parsed here, playing the role the remote store plays in
    production. Only CSV can be parsed locally.
    """

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    def _read_records(self) -> List[Dict[str, Any]]:
        if not self.storage.exists(CATALOG_PATH):
            return []
        return json.loads(self.storage.read_bytes(CATALOG_PATH))

    def _write_records(self, records: List[Dict[str, Any]]) -> None:
        self.storage.write_bytes(CATALOG_PATH, json.dumps(records, indent=2).encode("utf-8"))

    def fetch_catalog(self, page_size: int = DEFAULT_PAGE_SIZE) -> List[DatasetMeta]:
        catalog = catalog_from_records(self._read_records())
        catalog.sort(key=lambda m: m.created_at, reverse=True)
        return catalog[:page_size]

    def fetch_payload(self, dataset_id: str) -> DatasetPayload:
        path = _payload_path(dataset_id)
        if not self.storage.exists(path):
            raise NotFound(dataset_id)
        try:
            record = json.loads(self.storage.read_bytes(path))
        except OSError as e:
            raise TransientFetchError(dataset_id, f"Failed to read payload: {e}") from e
        return DatasetPayload.from_record(record)

    def delete_dataset(self, dataset_id: str) -> None:
        records = self._read_records()
        remaining = [r for r in records if str(r.get("_id")) != dataset_id]
        if len(remaining) == len(records):
            raise NotFound(dataset_id)
        self._write_records(remaining)
        self.storage.delete(_payload_path(dataset_id))

    def add_dataset(self, meta: DatasetMeta, payload: DatasetPayload) -> None:
        """Register an already-parsed dataset (seeding, tests)."""
        self.storage.write_bytes(
            _payload_path(meta.id),
            json.dumps({"headers": list(payload.headers), "data": [dict(r) for r in payload.rows]}).encode("utf-8"),
        )
        records = [r for r in self._read_records() if str(r.get("_id")) != meta.id]
        records.append(meta.to_record())
        self._write_records(records)

    def upload_dataset(
            self,
            content: bytes,
            file_name: str,
            *,
            display_name: Optional[str] = None,
            description: Optional[str] = None,
    ) -> None:
        if PurePath(file_name).suffix.lower() != ".csv":
            raise UnsupportedFileType(
                f"The local store can only parse CSV files, got '{file_name}'"
            )

        try:
            frame = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
        except (ValueError, pd.errors.ParserError) as e:
            raise DatasetSchemaError(f"Could not parse '{file_name}': {e}") from e

        payload = DatasetPayload.build(list(frame.columns), frame.to_dict("records"))
        meta = DatasetMeta(
            id=uuid.uuid4().hex[:24],
            file_name=PurePath(file_name).name,
            row_count=len(payload.rows),
            created_at=int(datetime.now(timezone.utc).timestamp() * 1000),
            display_name=(display_name or "").strip() or None,
            description=description or None,
        )
        self.add_dataset(meta, payload)
        logger.info(
            "Dataset uploaded to local store",
            extra={"dataset_id": meta.id, "file_name": meta.file_name, "n_rows": meta.row_count},
        )


ACCEPTED_CONTENT_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".csv": "text/csv",
}


def guess_content_type(file_name: str) -> str:
    return ACCEPTED_CONTENT_TYPES.get(PurePath(file_name).suffix.lower(), "application/octet-stream")


def is_accepted_tabular_file(file_name: str, content_type: Optional[str] = None) -> bool:
    """A blob is tabular if its declared type or its extension is one we accept."""
    if content_type and content_type in ACCEPTED_CONTENT_TYPES.values():
        return True
    return PurePath(file_name).suffix.lower() in ACCEPTED_CONTENT_TYPES


def create_store(cfg: StoreConfig) -> CatalogStore:
    """Build the store client described by the config."""
    if cfg.kind == "http":
        return HttpCatalogStore(cfg.base_url, token=cfg.token, timeout=cfg.timeout)
    return LocalCatalogStore(LocalFileSystemStorage(cfg.root))
