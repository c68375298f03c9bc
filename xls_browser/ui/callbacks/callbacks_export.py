from __future__ import annotations

from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State, dcc, exceptions

from xls_browser.core.export import chart_surface_id
from xls_browser.core.state import ComparisonState
from xls_browser.ui.callbacks.callbacks_utils import clicked_index, run_action, status
from xls_browser.ui.ids import IDs

if TYPE_CHECKING:
    from xls_browser.ui.config import AppConfig


def register_export_callbacks(app: dash.Dash, ctx: AppConfig) -> None:

    @app.callback(
        Output(IDs.Control.DOWNLOAD_CHART, "data"),
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "is_open", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "color", allow_duplicate=True),
        Input({"type": IDs.Pattern.CHART_DOWNLOAD, "index": ALL}, "n_clicks"),
        State(IDs.Store.COMPARISON_STATE, "data"),
        prevent_initial_call=True,
    )
    def download_chart(_n_clicks, state_data):
        dataset_id = clicked_index()
        if dataset_id is None:
            raise exceptions.PreventUpdate

        state = ComparisonState.from_dict(state_data)
        datasets = ctx.selection.members()
        subject = next((ds for ds in datasets if ds.id == dataset_id), None)
        if subject is None:
            raise exceptions.PreventUpdate

        artifact, failure = run_action(
            lambda: ctx.exporter.export_artifact(
                state.metric,
                datasets,
                ctx.snapshotter.snapshot_fn(state),
                surface_id=chart_surface_id(dataset_id),
                subject=subject,
                role=ctx.role,
            ),
            "Chart export failed",
            dataset_id=dataset_id,
        )
        if failure is not None:
            return (dash.no_update,) + failure

        return (
            dcc.send_bytes(artifact.data, artifact.filename),
        ) + status(f"Saved {artifact.filename}", "success")
