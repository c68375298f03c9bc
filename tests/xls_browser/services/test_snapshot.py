import pytest

from xls_browser.core.dataset import DatasetMeta, DatasetPayload
from xls_browser.core.exceptions import SnapshotError
from xls_browser.core.export import ExportCoordinator, MetricKind
from xls_browser.core.state import ComparisonState
from xls_browser.core.view_registry import ViewRegistry
from xls_browser.services.dataset_service import DatasetRegistry
from xls_browser.services.selection_service import SelectionSet
from xls_browser.services.snapshot import FigureSnapshotter
from xls_browser.services.storage import LocalFileSystemStorage
from xls_browser.services.store import LocalCatalogStore
from xls_browser.views import MetricChartView


def _setup(tmp_path):
    store = LocalCatalogStore(LocalFileSystemStorage(tmp_path))
    for i, name in enumerate(["sales.csv", "costs.csv"]):
        meta = DatasetMeta(id=f"d{i}", file_name=name, row_count=2, created_at=i)
        store.add_dataset(meta, DatasetPayload.build(["Q"], [{"Q": "1"}, {"Q": "2"}]))

    registry = DatasetRegistry(store)
    registry.refresh_catalog()
    selection = SelectionSet(registry)
    views = ViewRegistry()
    views.register(MetricChartView)

    rendered = []

    def renderer(figure, scale):
        rendered.append((figure, scale))
        return b"png-bytes"

    snapshotter = FigureSnapshotter(selection=selection, view_registry=views, renderer=renderer)
    return selection, snapshotter, rendered


def test_snapshot_renders_selected_chart(tmp_path):
    selection, snapshotter, rendered = _setup(tmp_path)
    selection.toggle("d0")

    data = snapshotter.snapshot("file-chart-d0", ComparisonState(metric=MetricKind.AVERAGE))

    assert data == b"png-bytes"
    (figure, scale), = rendered
    assert scale == 2.0
    assert list(figure.data[0].y) == [1.5]


def test_snapshot_of_unselected_surface_fails(tmp_path):
    _, snapshotter, _ = _setup(tmp_path)

    with pytest.raises(SnapshotError):
        snapshotter.snapshot("file-chart-d0", ComparisonState())
    with pytest.raises(SnapshotError):
        snapshotter.snapshot("something-else", ComparisonState())


def test_export_through_snapshotter(tmp_path):
    selection, snapshotter, rendered = _setup(tmp_path)
    selection.toggle("d1")
    selection.toggle("d0")

    artifact = ExportCoordinator(clock=lambda: 42).export_artifact(
        MetricKind.SUM,
        selection.members(),
        snapshotter.snapshot_fn(ComparisonState()),
        surface_id="file-chart-d0",
    )

    assert artifact.filename == "sum_costs.csv_sales.csv_42.png"
    assert len(rendered) == 1
