from __future__ import annotations

from typing import Dict, List, Sequence

import dash_bootstrap_components as dbc
import plotly.graph_objs as go
from dash import dcc, html

from xls_browser.core.dataset import Dataset
from xls_browser.core.export import MIN_EXPORT_DATASETS, MetricKind, chart_surface_id
from xls_browser.ui.helpers import format_count, raw_data_table
from xls_browser.ui.ids import IDs, chart_download_id, table_close_id


def build_comparison_panel() -> html.Div:
    metric_switch = dbc.RadioItems(
        id=IDs.Control.METRIC_SELECT,
        options=[{"label": kind.title, "value": kind.value} for kind in MetricKind],
        value=MetricKind.SUM.value,
        inline=True,
        className="btn-group",
        inputClassName="btn-check",
        labelClassName="btn btn-sm btn-outline-primary",
        labelCheckedClassName="active",
    )

    return html.Div(
        [
            html.Div(
                [
                    html.H5("Numeric comparison", className="mb-0"),
                    metric_switch,
                ],
                className="d-flex justify-content-between align-items-center mt-3",
            ),
            html.Div(id=IDs.Control.CHARTS_CONTAINER, className="mt-2"),
            html.H5("Data", className="mt-4"),
            html.Div(id=IDs.Control.TABLES_CONTAINER),
            dcc.Download(id=IDs.Control.DOWNLOAD_CHART),
        ]
    )


def build_chart_cards(datasets: Sequence[Dataset], figures: Dict[str, go.Figure]) -> html.Div:
    """Per-dataset chart cards; comparison needs at least two datasets."""
    if len(datasets) < MIN_EXPORT_DATASETS:
        return html.Div(
            f"Select at least {MIN_EXPORT_DATASETS} files to compare their numeric columns.",
            className="text-muted small",
        )

    cols: List = []
    for ds in datasets:
        cols.append(
            dbc.Col(
                dbc.Card(
                    [
                        dbc.CardHeader(
                            html.Div(
                                [
                                    html.Div(
                                        [
                                            html.Div(ds.label, className="fw-semibold"),
                                            html.Div(f"{format_count(ds.row_count)} rows", className="text-muted small"),
                                        ]
                                    ),
                                    dbc.Button("Download", id=chart_download_id(ds.id), size="sm", color="primary"),
                                ],
                                className="d-flex justify-content-between align-items-center",
                            )
                        ),
                        dbc.CardBody(
                            dcc.Graph(
                                id=chart_surface_id(ds.id),
                                figure=figures[ds.id],
                                config={"displaylogo": False},
                            ),
                            className="p-2",
                        ),
                    ],
                    className="h-100",
                ),
                lg=6,
                className="mb-3",
            )
        )
    return dbc.Row(cols, className="gx-3")


def build_table_cards(datasets: Sequence[Dataset], max_rows: int) -> html.Div:
    if not datasets:
        return html.Div("No files selected.", className="text-muted small")

    cols: List = []
    for ds in datasets:
        header_children = [
            html.Div(
                [
                    html.Span(ds.label, className="fw-semibold"),
                    dbc.Button("×", id=table_close_id(ds.id), size="sm", color="link", className="p-0"),
                ],
                className="d-flex justify-content-between align-items-center",
            )
        ]
        if ds.meta.description:
            header_children.append(html.Div(ds.meta.description, className="small text-muted"))

        cols.append(
            dbc.Col(
                dbc.Card(
                    [
                        dbc.CardHeader(header_children),
                        dbc.CardBody(raw_data_table(ds, max_rows=max_rows), className="p-2"),
                    ],
                    className="h-100",
                ),
                lg=6,
                className="mb-3",
            )
        )
    return dbc.Row(cols, className="gx-3")
