from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from .dataset import Dataset, DatasetMeta

MetaLike = Union[DatasetMeta, Dataset]


@dataclass(frozen=True)
class DashboardRollup:
    """
    Headline numbers for the dashboard banner.

    latest_upload_timestamp is epoch milliseconds, or 0 when the catalog is
    empty; 0 is never a real upload time and the UI shows a placeholder.
    """
    total_selected_rows: int
    latest_upload_timestamp: int
    catalog_size: int = 0
    selected_count: int = 0


def _meta(item: MetaLike) -> DatasetMeta:
    return item.meta if isinstance(item, Dataset) else item


def compute_rollup(catalog: Sequence[MetaLike], selection: Sequence[MetaLike]) -> DashboardRollup:
    """
    Roll up the catalog and the current selection.

    total_selected_rows uses each selected dataset's declared row_count, so
    it is available before (or without) the payload being fetched.
    latest_upload_timestamp looks at the whole catalog, not the selection.
    """
    total_rows = sum(_meta(item).row_count or 0 for item in selection)
    latest = max((_meta(item).created_at for item in catalog), default=0)

    return DashboardRollup(
        total_selected_rows=total_rows,
        latest_upload_timestamp=max(latest, 0),
        catalog_size=len(catalog),
        selected_count=len(selection),
    )
