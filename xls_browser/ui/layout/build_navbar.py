from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from xls_browser.config.model import GlobalConfig
from xls_browser.core.roles import Role


def build_navbar(global_config: GlobalConfig, role: Role) -> dbc.Navbar:
    title = getattr(global_config, "ui_title", "Spreadsheet Browser")
    subtitle = getattr(global_config, "subtitle", "")

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(title, className="mb-0"),
                        html.Small(subtitle, className="text-muted", id="navbar-subtitle"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                dbc.Badge(
                    role.value.capitalize(),
                    color="secondary" if not role.is_admin else "primary",
                    className="ms-auto",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm xlb-navbar",
    )
