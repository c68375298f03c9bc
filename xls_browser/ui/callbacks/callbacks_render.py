from __future__ import annotations

from typing import TYPE_CHECKING, Dict

import dash
import plotly.graph_objs as go
from dash import ALL, Input, Output, State, exceptions

from xls_browser.core.export import MetricKind
from xls_browser.core.rollup import compute_rollup
from xls_browser.core.state import ComparisonState
from xls_browser.ui.callbacks.callbacks_utils import clicked_index
from xls_browser.ui.helpers import format_count, format_upload_timestamp
from xls_browser.ui.ids import IDs
from xls_browser.ui.layout.build_comparison_panel import build_chart_cards, build_table_cards
from xls_browser.views import MetricChartView

if TYPE_CHECKING:
    from xls_browser.ui.config import AppConfig


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    registry = ctx.registry
    selection = ctx.selection

    @app.callback(
        Output(IDs.Store.COMPARISON_STATE, "data"),
        Input(IDs.Control.METRIC_SELECT, "value"),
        State(IDs.Store.COMPARISON_STATE, "data"),
    )
    def update_metric(metric, state_data):
        state = ComparisonState.from_dict(state_data)
        try:
            state.metric = MetricKind(metric)
        except ValueError:
            raise exceptions.PreventUpdate
        return state.to_dict()

    @app.callback(
        Output(IDs.Control.ROLLUP_AVAILABLE, "children"),
        Output(IDs.Control.ROLLUP_SELECTED, "children"),
        Output(IDs.Control.ROLLUP_ROWS, "children"),
        Output(IDs.Control.ROLLUP_LATEST, "children"),
        Input(IDs.Store.SELECTION, "data"),
        Input(IDs.Store.CATALOG_VERSION, "data"),
    )
    def render_rollup(_selection_ids, _version):
        rollup = compute_rollup(registry.list_catalog(), selection.members())
        return (
            format_count(rollup.catalog_size),
            format_count(rollup.selected_count),
            format_count(rollup.total_selected_rows),
            format_upload_timestamp(rollup.latest_upload_timestamp),
        )

    @app.callback(
        Output(IDs.Control.CHARTS_CONTAINER, "children"),
        Input(IDs.Store.SELECTION, "data"),
        Input(IDs.Store.COMPARISON_STATE, "data"),
        Input(IDs.Store.CATALOG_VERSION, "data"),
    )
    def render_charts(_selection_ids, state_data, _version):
        state = ComparisonState.from_dict(state_data)
        datasets = selection.members()

        figures: Dict[str, go.Figure] = {}
        for ds in datasets:
            view = ctx.view_registry.create(MetricChartView.id, ds)
            figures[ds.id] = view.figure(state)

        return build_chart_cards(datasets, figures)

    @app.callback(
        Output(IDs.Control.TABLES_CONTAINER, "children"),
        Input(IDs.Store.SELECTION, "data"),
        Input(IDs.Store.CATALOG_VERSION, "data"),
        State(IDs.Store.COMPARISON_STATE, "data"),
    )
    def render_tables(_selection_ids, _version, state_data):
        state = ComparisonState.from_dict(state_data)
        return build_table_cards(selection.members(), state.preview_rows)

    @app.callback(
        Output(IDs.Store.SELECTION, "data", allow_duplicate=True),
        Input({"type": IDs.Pattern.TABLE_CLOSE, "index": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def close_table(_n_clicks):
        dataset_id = clicked_index()
        if dataset_id is None:
            raise exceptions.PreventUpdate
        selection.remove(dataset_id)
        return selection.ids()
