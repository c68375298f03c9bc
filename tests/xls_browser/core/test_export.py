import pytest

from xls_browser.core.dataset import Dataset, DatasetMeta
from xls_browser.core.exceptions import Forbidden, InsufficientSelection, SnapshotError
from xls_browser.core.export import (
    ExportCoordinator,
    MetricKind,
    chart_surface_id,
    safe_label,
)
from xls_browser.core.roles import Role


def _ds(dataset_id, label):
    return Dataset(meta=DatasetMeta(id=dataset_id, file_name=label))


class _Snapshot:
    def __init__(self, data=b"\x89PNG fake"):
        self.data = data
        self.calls = []

    def __call__(self, surface_id):
        self.calls.append(surface_id)
        return self.data


def _coordinator(now=1_700_000_000_000):
    return ExportCoordinator(clock=lambda: now)


@pytest.mark.parametrize("n", [0, 1])
def test_export_requires_two_datasets(n):
    datasets = [_ds(f"d{i}", f"f{i}.csv") for i in range(n)]
    snap = _Snapshot()

    with pytest.raises(InsufficientSelection):
        _coordinator().export_artifact(MetricKind.SUM, datasets, snap, surface_id="file-chart-d0")

    assert snap.calls == []


def test_export_snapshots_once_and_names_file():
    datasets = [_ds("a", "sales.xlsx"), _ds("b", "costs.csv")]
    snap = _Snapshot()

    artifact = _coordinator().export_artifact(
        MetricKind.SUM, datasets, snap, surface_id=chart_surface_id("a"),
    )

    assert snap.calls == ["file-chart-a"]
    assert artifact.filename == "sum_sales.xlsx_costs.csv_1700000000000.png"
    assert artifact.data == snap.data
    assert artifact.mime_type == "image/png"


def test_export_label_includes_subject():
    datasets = [_ds("a", "sales.xlsx"), _ds("b", "costs.csv")]

    artifact = _coordinator(5).export_artifact(
        MetricKind.AVERAGE, datasets, _Snapshot(), surface_id="file-chart-b", subject=datasets[1],
    )

    assert artifact.filename == "average_costs.csv_sales.xlsx_costs.csv_5.png"


def test_filenames_never_repeat_within_same_millisecond():
    coordinator = _coordinator()
    datasets = [_ds("a", "x.csv"), _ds("b", "y.csv")]

    names = {coordinator.build_filename(MetricKind.SUM, datasets) for _ in range(5)}

    assert len(names) == 5


def test_snapshot_failure_is_wrapped():
    def broken(_surface_id):
        raise RuntimeError("no browser")

    datasets = [_ds("a", "x.csv"), _ds("b", "y.csv")]
    with pytest.raises(SnapshotError) as exc:
        _coordinator().export_artifact(MetricKind.SUM, datasets, broken, surface_id="file-chart-a")

    assert exc.value.surface_id == "file-chart-a"


def test_empty_snapshot_is_an_error():
    datasets = [_ds("a", "x.csv"), _ds("b", "y.csv")]
    with pytest.raises(SnapshotError):
        _coordinator().export_artifact(MetricKind.SUM, datasets, _Snapshot(b""), surface_id="file-chart-a")


def test_anonymous_cannot_export():
    datasets = [_ds("a", "x.csv"), _ds("b", "y.csv")]
    snap = _Snapshot()
    with pytest.raises(Forbidden):
        _coordinator().export_artifact(
            MetricKind.SUM, datasets, snap, surface_id="file-chart-a", role=Role.ANONYMOUS,
        )
    assert snap.calls == []


def test_save_fn_receives_artifact():
    saved = {}
    datasets = [_ds("a", "x.csv"), _ds("b", "y.csv")]

    artifact = _coordinator().export_artifact(
        MetricKind.SUM, datasets, _Snapshot(), surface_id="file-chart-a",
        save_fn=lambda name, data: saved.update({name: data}),
    )

    assert saved == {artifact.filename: artifact.data}


def test_safe_label():
    assert safe_label("Q1/Q2: report") == "Q1-Q2- report"
    assert safe_label("   ") == "dataset"
