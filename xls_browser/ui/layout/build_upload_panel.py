from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from xls_browser.ui.ids import IDs


def build_upload_panel() -> dbc.Card:
    """
    Upload form (admins only):

    - Spreadsheet/CSV file
    - Optional display name and description
    """
    return dbc.Card(
        [
            dbc.CardHeader("Upload a file"),
            dbc.CardBody(
                [
                    dcc.Upload(
                        id=IDs.Control.UPLOAD,
                        children=html.Div(
                            ["Drag and drop or ", html.A("select an Excel/CSV file")]
                        ),
                        multiple=False,
                        accept=".xlsx,.xls,.csv",
                        className="xlb-upload border rounded p-2 text-center",
                    ),
                    html.Div(id=IDs.Control.UPLOAD_FILENAME, className="small text-muted mt-1"),

                    html.Label("Display name", className="form-label mt-2"),
                    dbc.Input(id=IDs.Control.UPLOAD_DISPLAY_NAME, placeholder="Optional", size="sm"),

                    html.Label("Description", className="form-label mt-2"),
                    dbc.Textarea(id=IDs.Control.UPLOAD_DESCRIPTION, placeholder="Optional", size="sm"),

                    dbc.Button(
                        "Upload",
                        id=IDs.Control.UPLOAD_SUBMIT_BTN,
                        color="primary",
                        size="sm",
                        className="mt-2",
                    ),
                ]
            ),
        ],
        className="mt-3",
    )
