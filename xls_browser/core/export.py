from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from .dataset import Dataset
from .exceptions import InsufficientSelection, SnapshotError
from .roles import Role, require_authenticated

logger = logging.getLogger(__name__)

MIN_EXPORT_DATASETS = 2
CHART_SURFACE_PREFIX = "file-chart-"

SnapshotFn = Callable[[str], bytes]
SaveFn = Callable[[str, bytes], None]

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


class MetricKind(str, Enum):
    """Metrics a comparison chart can show. The value doubles as the file label."""
    SUM = "sum"
    AVERAGE = "average"

    @property
    def title(self) -> str:
        return "Sum" if self is MetricKind.SUM else "Average"


@dataclass(frozen=True)
class ExportedArtifact:
    filename: str
    data: bytes
    surface_id: str
    mime_type: str = "image/png"


def _now_ms() -> int:
    return int(time.time() * 1000)


def safe_label(text: str) -> str:
    """Make a dataset label usable inside a file name."""
    cleaned = _UNSAFE_CHARS.sub("-", text).strip()
    return cleaned or "dataset"


def chart_surface_id(dataset_id: str) -> str:
    """Surface handle of one dataset's metric chart."""
    return f"{CHART_SURFACE_PREFIX}{dataset_id}"


class ExportCoordinator:
    """
    Decides what a chart export is called and hands rasterisation off to an
    external snapshot function.

    File names look like::

        {kind}[_{subject}]_{label1}_{label2}..._{timestamp_ms}.png

    The timestamp suffix strictly increases across exports from the same
    coordinator, so repeated exports of the same selection never collide.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._clock = clock
        self._last_stamp = 0

    def _next_stamp(self) -> int:
        stamp = max(int(self._clock()), self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    @staticmethod
    def build_label(kind: MetricKind, subject: Optional[Dataset] = None) -> str:
        kind = MetricKind(kind)
        if subject is None:
            return kind.value
        return f"{kind.value}_{safe_label(subject.label)}"

    def build_filename(
            self,
            kind: MetricKind,
            datasets: Sequence[Dataset],
            *,
            subject: Optional[Dataset] = None,
            extension: str = "png",
    ) -> str:
        label = self.build_label(kind, subject)
        joined = "_".join(safe_label(ds.label) for ds in datasets)
        return f"{label}_{joined}_{self._next_stamp()}.{extension}"

    def export_artifact(
            self,
            kind: MetricKind,
            datasets: Sequence[Dataset],
            snapshot_fn: SnapshotFn,
            *,
            surface_id: str,
            subject: Optional[Dataset] = None,
            role: Role = Role.USER,
            save_fn: Optional[SaveFn] = None,
    ) -> ExportedArtifact:
        """
        Snapshot `surface_id` and name the image after the selection.

        Raises:
            Forbidden: the role may not view data
            InsufficientSelection: fewer than two datasets are selected
            SnapshotError: the snapshot function failed; not retried
        """
        require_authenticated(role, "export charts")

        if len(datasets) < MIN_EXPORT_DATASETS:
            raise InsufficientSelection(len(datasets), MIN_EXPORT_DATASETS)

        kind = MetricKind(kind)
        filename = self.build_filename(kind, datasets, subject=subject)

        try:
            data = snapshot_fn(surface_id)
        except SnapshotError:
            raise
        except Exception as e:
            logger.exception("Snapshot failed", extra={"surface_id": surface_id})
            raise SnapshotError(surface_id, f"Failed to render chart '{surface_id}': {e}") from e

        if not data:
            raise SnapshotError(surface_id, f"Chart '{surface_id}' rendered no image data")

        artifact = ExportedArtifact(filename=filename, data=data, surface_id=surface_id)

        if save_fn is not None:
            save_fn(artifact.filename, artifact.data)

        logger.info(
            "Chart exported",
            extra={
                "surface_id": surface_id,
                "export_filename": filename,
                "n_datasets": len(datasets),
                "n_bytes": len(data),
            },
        )
        return artifact
