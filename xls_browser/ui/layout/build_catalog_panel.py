from __future__ import annotations

from typing import List, Sequence

import dash_bootstrap_components as dbc
from dash import html

from xls_browser.core.dataset import DatasetMeta
from xls_browser.core.roles import Role
from xls_browser.ui.helpers import dataset_caption
from xls_browser.ui.ids import IDs, catalog_delete_id, catalog_toggle_id


def build_catalog_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Span("Files", className="fw-semibold"),
                        dbc.Button(
                            "Refresh",
                            id=IDs.Control.CATALOG_REFRESH_BTN,
                            size="sm",
                            color="secondary",
                            outline=True,
                        ),
                    ],
                    className="d-flex justify-content-between align-items-center",
                )
            ),
            dbc.CardBody(html.Div(id=IDs.Control.CATALOG_LIST), className="p-2"),
        ],
        className="h-100",
    )


def build_catalog_items(
        catalog: Sequence[DatasetMeta],
        selected_ids: Sequence[str],
        role: Role,
) -> html.Div:
    """One row per dataset: select toggle, label, caption and (admins) delete."""
    if not catalog:
        return html.Div("No files uploaded yet.", className="text-muted small p-2")

    selected = set(selected_ids)
    items: List = []
    for meta in catalog:
        is_selected = meta.id in selected
        actions = [
            dbc.Button(
                "Selected" if is_selected else "Select",
                id=catalog_toggle_id(meta.id),
                size="sm",
                color="primary" if is_selected else "secondary",
                outline=not is_selected,
                className="me-1",
            )
        ]
        if role.is_admin:
            actions.append(
                dbc.Button(
                    "Delete",
                    id=catalog_delete_id(meta.id),
                    size="sm",
                    color="danger",
                    outline=True,
                )
            )

        items.append(
            dbc.ListGroupItem(
                html.Div(
                    [
                        html.Div(
                            [
                                html.Div(meta.label, className="fw-semibold"),
                                html.Div(dataset_caption(meta), className="text-muted small"),
                            ]
                        ),
                        html.Div(actions, className="d-flex"),
                    ],
                    className="d-flex justify-content-between align-items-center",
                ),
                active=False,
            )
        )

    return dbc.ListGroup(items, flush=True)
