from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Mapping, Optional

from xls_browser.core.dataset import Dataset, DatasetMeta, DatasetPayload
from xls_browser.core.exceptions import NotFound, TransientFetchError, UnsupportedFileType
from xls_browser.core.roles import Role, require_admin
from xls_browser.services.store import DEFAULT_PAGE_SIZE, CatalogStore, is_accepted_tabular_file

logger = logging.getLogger(__name__)

EvictionListener = Callable[[str], None]


class DatasetRegistry(Mapping[str, Dataset]):
    """
    Catalog of every dataset the store lists, plus a cache of the payloads
    the user has opened.

    Implements the Mapping interface (dict-like): `registry[id]` returns the
    Dataset with its payload, loading it lazily on first access. Iteration
    follows catalog order.

    The payload cache is written only by load completion and eviction.
    Evicted ids never serve stale data: their metadata and payload are
    dropped together and eviction listeners are told so they can let go too.
    """

    def __init__(self, store: CatalogStore, *, page_size: int = DEFAULT_PAGE_SIZE):
        self._store = store
        self._page_size = page_size
        self._catalog: Dict[str, DatasetMeta] = {}
        self._payloads: Dict[str, DatasetPayload] = {}
        self._listeners: List[EvictionListener] = []

    # ------------------------------------------------------------------
    # Mapping interface
    # ------------------------------------------------------------------
    def __getitem__(self, dataset_id: str) -> Dataset:
        meta = self._catalog.get(dataset_id)
        if meta is None:
            raise KeyError(f"Unknown dataset '{dataset_id}'")
        return Dataset(meta=meta, payload=self.load_payload(dataset_id))

    def __iter__(self) -> Iterator[str]:
        return iter(self._catalog)

    def __len__(self) -> int:
        return len(self._catalog)

    def __contains__(self, dataset_id: object) -> bool:
        return dataset_id in self._catalog

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    def list_catalog(self) -> List[DatasetMeta]:
        """Latest known catalog; says nothing about payload residency."""
        return list(self._catalog.values())

    def get_meta(self, dataset_id: str) -> Optional[DatasetMeta]:
        return self._catalog.get(dataset_id)

    def refresh_catalog(self, page_size: Optional[int] = None) -> List[DatasetMeta]:
        """
        Re-read the catalog from the store.

        Ids that were known but are no longer listed have been deleted
        elsewhere and are evicted.
        """
        catalog = self._store.fetch_catalog(page_size or self._page_size)
        fresh = {meta.id: meta for meta in catalog}

        vanished = [dataset_id for dataset_id in self._catalog if dataset_id not in fresh]
        self._catalog = fresh
        for dataset_id in vanished:
            self.evict(dataset_id)

        logger.info(
            "Catalog refreshed",
            extra={"n_datasets": len(fresh), "n_evicted": len(vanished)},
        )
        return self.list_catalog()

    # ------------------------------------------------------------------
    # Payloads
    # ------------------------------------------------------------------
    def is_resident(self, dataset_id: str) -> bool:
        return dataset_id in self._payloads

    def cached_payload(self, dataset_id: str) -> Optional[DatasetPayload]:
        return self._payloads.get(dataset_id)

    def load_payload(self, dataset_id: str) -> DatasetPayload:
        """
        Return the payload for `dataset_id`, fetching it on first request.

        Raises:
            NotFound: the store no longer has the dataset (it is evicted)
            TransientFetchError: recoverable I/O failure; nothing is cached
        """
        cached = self._payloads.get(dataset_id)
        if cached is not None:
            return cached

        logger.info("Loading dataset payload", extra={"dataset_id": dataset_id})
        try:
            payload = self._store.fetch_payload(dataset_id)
        except NotFound:
            logger.warning("Dataset vanished from store", extra={"dataset_id": dataset_id})
            self.evict(dataset_id)
            raise
        except TransientFetchError as e:
            logger.error(
                "Transient error loading dataset payload",
                extra={"dataset_id": dataset_id, "error": str(e)},
            )
            raise

        self.store_payload(dataset_id, payload)
        return payload

    def store_payload(self, dataset_id: str, payload: DatasetPayload) -> None:
        """Record a completed load. Last write wins per id."""
        self._payloads[dataset_id] = payload

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------
    def add_eviction_listener(self, listener: EvictionListener) -> None:
        self._listeners.append(listener)

    def evict(self, dataset_id: str) -> None:
        """Drop metadata and cached payload for `dataset_id`. Idempotent."""
        had_meta = self._catalog.pop(dataset_id, None) is not None
        had_payload = self._payloads.pop(dataset_id, None) is not None

        if had_meta or had_payload:
            logger.info("Dataset evicted", extra={"dataset_id": dataset_id})

        for listener in list(self._listeners):
            listener(dataset_id)

    # ------------------------------------------------------------------
    # Admin mutations
    # ------------------------------------------------------------------
    def delete(self, dataset_id: str, *, role: Role) -> None:
        """
        Delete a dataset in the store (admin only).

        A dataset the store no longer knows is as good as deleted: it is
        evicted and NotFound is re-raised so the caller can say so.
        """
        require_admin(role, "delete datasets")

        try:
            self._store.delete_dataset(dataset_id)
        except NotFound:
            self.evict(dataset_id)
            raise

        logger.info("Dataset deleted", extra={"dataset_id": dataset_id})
        self.evict(dataset_id)

    def upload(
            self,
            content: bytes,
            file_name: str,
            *,
            role: Role,
            content_type: Optional[str] = None,
            display_name: Optional[str] = None,
            description: Optional[str] = None,
    ) -> List[DatasetMeta]:
        """
        Submit a spreadsheet/CSV to the store (admin only) and refresh the
        catalog so the new dataset is listed.
        """
        require_admin(role, "upload datasets")

        if not is_accepted_tabular_file(file_name, content_type):
            raise UnsupportedFileType(
                f"'{file_name}' is not a supported file. Upload an Excel or CSV file (.xlsx, .xls, .csv)."
            )

        self._store.upload_dataset(
            content,
            file_name,
            display_name=display_name,
            description=description,
        )
        logger.info(
            "Dataset uploaded",
            extra={"file_name": file_name, "n_bytes": len(content)},
        )
        return self.refresh_catalog()
