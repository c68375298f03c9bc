from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .export import MetricKind


@dataclass
class ComparisonState:
    """
    UI state the comparison views render from.

    - metric: which aggregate the charts show (sum or average)
    - preview_rows: how many raw rows each data table shows
    """
    metric: MetricKind = MetricKind.SUM
    preview_rows: int = 50

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["metric"] = self.metric.value
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> ComparisonState:
        data = data or {}
        try:
            metric = MetricKind(data.get("metric", MetricKind.SUM.value))
        except ValueError:
            metric = MetricKind.SUM
        return cls(
            metric=metric,
            preview_rows=int(data.get("preview_rows", 50)),
        )
