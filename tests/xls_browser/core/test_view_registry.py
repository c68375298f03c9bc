import pytest

from xls_browser.core.dataset import Dataset, DatasetMeta
from xls_browser.core.state import ComparisonState
from xls_browser.core.export import MetricKind
from xls_browser.core.view_registry import ViewRegistry
from xls_browser.views import MetricChartView


def test_register_and_create():
    registry = ViewRegistry()
    registry.register(MetricChartView)

    view = registry.create("metric_chart", Dataset(meta=DatasetMeta(id="a", file_name="a.csv")))

    assert isinstance(view, MetricChartView)
    assert registry.all_classes() == [MetricChartView]


def test_register_rejects_duplicates_and_non_views():
    registry = ViewRegistry()
    registry.register(MetricChartView)

    with pytest.raises(ValueError):
        registry.register(MetricChartView)
    with pytest.raises(TypeError):
        registry.register(object)


def test_create_unknown_view():
    with pytest.raises(KeyError):
        ViewRegistry().create("nope", Dataset(meta=DatasetMeta(id="a", file_name="a.csv")))


def test_comparison_state_round_trip_and_bad_metric():
    state = ComparisonState(metric=MetricKind.AVERAGE, preview_rows=10)
    assert ComparisonState.from_dict(state.to_dict()) == state

    assert ComparisonState.from_dict({"metric": "median"}).metric is MetricKind.SUM
    assert ComparisonState.from_dict(None) == ComparisonState()
