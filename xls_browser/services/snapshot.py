from __future__ import annotations

from typing import Callable, Optional

import plotly.graph_objs as go

from xls_browser.core.dataset import Dataset
from xls_browser.core.exceptions import SnapshotError
from xls_browser.core.export import CHART_SURFACE_PREFIX
from xls_browser.core.state import ComparisonState
from xls_browser.core.view_registry import ViewRegistry
from xls_browser.services.selection_service import SelectionSet


class FigureSnapshotter:
    """
    Rasterises a chart surface to PNG.

    Surfaces are named `file-chart-<dataset id>`; the figure is rebuilt from
    the current selection and comparison state with the same view the UI
    draws, then rendered with plotly's static image export (kaleido).
    """

    def __init__(
            self,
            *,
            selection: SelectionSet,
            view_registry: ViewRegistry,
            view_id: str = "metric_chart",
            scale: float = 2.0,
            renderer: Optional[Callable[[go.Figure, float], bytes]] = None,
    ) -> None:
        self._selection = selection
        self._views = view_registry
        self._view_id = view_id
        self._scale = scale
        self._renderer = renderer or _to_png

    def _dataset_for_surface(self, surface_id: str) -> Dataset:
        if not surface_id or not surface_id.startswith(CHART_SURFACE_PREFIX):
            raise SnapshotError(surface_id, f"Unknown chart surface '{surface_id}'")

        dataset_id = surface_id[len(CHART_SURFACE_PREFIX):]
        for ds in self._selection.members():
            if ds.id == dataset_id:
                return ds
        raise SnapshotError(surface_id, f"Chart '{surface_id}' is not on screen")

    def build_figure(self, surface_id: str, state: ComparisonState) -> go.Figure:
        ds = self._dataset_for_surface(surface_id)
        return self._views.create(self._view_id, ds).figure(state)

    def snapshot(self, surface_id: str, state: ComparisonState) -> bytes:
        figure = self.build_figure(surface_id, state)
        return self._renderer(figure, self._scale)

    def snapshot_fn(self, state: ComparisonState) -> Callable[[str], bytes]:
        """Bind the comparison state, giving the `surface id -> bytes` shape export expects."""
        return lambda surface_id: self.snapshot(surface_id, state)


def _to_png(figure: go.Figure, scale: float) -> bytes:
    # requires kaleido
    return figure.to_image(format="png", scale=scale)
