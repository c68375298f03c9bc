from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from xls_browser.core.state import ComparisonState
from xls_browser.ui.ids import IDs
from xls_browser.ui.layout.build_catalog_panel import build_catalog_panel
from xls_browser.ui.layout.build_comparison_panel import build_comparison_panel
from xls_browser.ui.layout.build_navbar import build_navbar
from xls_browser.ui.layout.build_rollup_panel import build_rollup_panel
from xls_browser.ui.layout.build_upload_panel import build_upload_panel

if TYPE_CHECKING:
    from xls_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig):
    sidebar = [build_catalog_panel()]
    if ctx.role.is_admin:
        sidebar.append(build_upload_panel())

    return dbc.Container(
        fluid=True,
        className="xlb-root",
        children=[
            build_navbar(ctx.global_config, ctx.role),

            # App-level stores
            dcc.Store(id=IDs.Store.SELECTION, data=ctx.selection.ids()),
            dcc.Store(id=IDs.Store.CATALOG_VERSION, data=0),
            dcc.Store(id=IDs.Store.COMPARISON_STATE, data=ComparisonState().to_dict()),

            dbc.Alert(id=IDs.Control.STATUS_BAR, is_open=False, dismissable=True, className="mt-3 mb-0"),

            build_rollup_panel(),

            dbc.Row(
                [
                    dbc.Col(sidebar, md=4, className="mt-3"),
                    dbc.Col(build_comparison_panel(), md=8),
                ],
                className="gx-3",
            ),
            html.Footer(className="mb-4"),
        ],
    )
