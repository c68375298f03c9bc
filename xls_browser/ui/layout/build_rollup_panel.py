from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from xls_browser.ui.ids import IDs


def _stat_card(label: str, value_id: str) -> dbc.Col:
    return dbc.Col(
        dbc.Card(
            dbc.CardBody(
                [
                    html.Div(label, className="text-muted small"),
                    html.Div("0", id=value_id, className="fs-4 fw-bold mt-1"),
                ]
            ),
            className="h-100",
        ),
        md=3,
        sm=6,
        className="mb-2",
    )


def build_rollup_panel() -> dbc.Row:
    """Dashboard banner: catalog size, selection size, selected rows, last upload."""
    return dbc.Row(
        [
            _stat_card("Available files", IDs.Control.ROLLUP_AVAILABLE),
            _stat_card("Selected files", IDs.Control.ROLLUP_SELECTED),
            _stat_card("Selected rows", IDs.Control.ROLLUP_ROWS),
            _stat_card("Last update", IDs.Control.ROLLUP_LATEST),
        ],
        className="mt-3 gx-3",
    )
