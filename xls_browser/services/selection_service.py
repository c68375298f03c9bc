from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from xls_browser.core.dataset import Dataset, DatasetPayload
from xls_browser.core.exceptions import NotFound
from xls_browser.services.dataset_service import DatasetRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadTicket:
    """Handle for one in-flight payload load of a single dataset id."""
    dataset_id: str
    token: int


class SelectionSet:
    """
    Ordered, duplicate-free set of dataset ids the user is comparing.

    Order is toggle order (not catalog order) and drives the left-to-right
    layout of charts and tables. An id becomes a member only once its
    payload has loaded; while the load is pending it is tracked separately
    and toggling/removing it again cancels the load, so a late completion
    is ignored instead of re-adding the id.

    Subscribes to registry evictions: a dataset deleted in the store leaves
    the selection as soon as the registry sees it go.
    """

    def __init__(self, registry: DatasetRegistry):
        self._registry = registry
        # dicts keep insertion order and give O(1) removal
        self._members: Dict[str, None] = {}
        self._pending: Dict[str, int] = {}
        self._tokens = itertools.count(1)
        registry.add_eviction_listener(self.discard)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def __contains__(self, dataset_id: object) -> bool:
        return dataset_id in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._members))

    def ids(self) -> List[str]:
        return list(self._members)

    def is_pending(self, dataset_id: str) -> bool:
        return dataset_id in self._pending

    def members(self) -> List[Dataset]:
        """Selected datasets in selection order, with payload when resident."""
        out: List[Dataset] = []
        for dataset_id in self._members:
            meta = self._registry.get_meta(dataset_id)
            if meta is None:
                continue
            out.append(Dataset(meta=meta, payload=self._registry.cached_payload(dataset_id)))
        return out

    # ------------------------------------------------------------------
    # Membership changes
    # ------------------------------------------------------------------
    def toggle(self, dataset_id: str) -> bool:
        """
        Flip membership of `dataset_id`. Returns True if it is now selected.

        Adding loads the payload first; if that fails the id is not added
        and the error propagates (NotFound also evicts the id from the
        registry).
        """
        if dataset_id in self._members or dataset_id in self._pending:
            self.remove(dataset_id)
            return False

        if self._registry.get_meta(dataset_id) is None:
            raise NotFound(dataset_id, f"Dataset '{dataset_id}' is not in the catalog")

        ticket = self.begin_load(dataset_id)
        try:
            payload = self._registry.load_payload(dataset_id)
        except Exception as e:
            self.fail_load(ticket, e)
            raise
        return self.complete_load(ticket, payload)

    def remove(self, dataset_id: str) -> None:
        """Close a dataset. Cancels a pending load; never starts one."""
        self._pending.pop(dataset_id, None)
        if self._members.pop(dataset_id, _ABSENT) is not _ABSENT:
            logger.debug("Dataset removed from selection", extra={"dataset_id": dataset_id})

    def discard(self, dataset_id: str) -> None:
        """Eviction hook: forget the id whatever state it is in."""
        self.remove(dataset_id)

    def clear(self) -> None:
        self._members.clear()
        self._pending.clear()

    # ------------------------------------------------------------------
    # Split form for loads that complete out of order
    # ------------------------------------------------------------------
    def begin_load(self, dataset_id: str) -> LoadTicket:
        """Mark `dataset_id` as loading. A newer ticket supersedes an older one."""
        token = next(self._tokens)
        self._pending[dataset_id] = token
        return LoadTicket(dataset_id=dataset_id, token=token)

    def _is_current(self, ticket: LoadTicket) -> bool:
        return self._pending.get(ticket.dataset_id) == ticket.token

    def complete_load(self, ticket: LoadTicket, payload: DatasetPayload) -> bool:
        """
        Apply a successful load. Returns False (and changes nothing) if the
        ticket was cancelled or superseded, or the dataset has since left
        the catalog.
        """
        if not self._is_current(ticket):
            logger.debug("Ignoring stale load completion", extra={"dataset_id": ticket.dataset_id})
            return False

        del self._pending[ticket.dataset_id]

        if self._registry.get_meta(ticket.dataset_id) is None:
            return False

        self._registry.store_payload(ticket.dataset_id, payload)
        self._members[ticket.dataset_id] = None
        logger.debug("Dataset added to selection", extra={"dataset_id": ticket.dataset_id})
        return True

    def fail_load(self, ticket: LoadTicket, error: Optional[BaseException] = None) -> None:
        """Roll back a failed load: the id stays out of the selection."""
        if self._is_current(ticket):
            del self._pending[ticket.dataset_id]

        if isinstance(error, NotFound):
            self.remove(ticket.dataset_id)

        logger.warning(
            "Dataset could not be added to selection",
            extra={"dataset_id": ticket.dataset_id, "error": str(error) if error else None},
        )


_ABSENT = object()
