from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State, exceptions

from xls_browser.ui.callbacks.callbacks_utils import STATUS_CLOSED, clicked_index, run_action, status
from xls_browser.ui.ids import IDs
from xls_browser.ui.layout.build_catalog_panel import build_catalog_items

if TYPE_CHECKING:
    from xls_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _decode_upload(contents: str):
    """Split a dcc.Upload data URL into (content_type, bytes)."""
    header, _, encoded = contents.partition(",")
    content_type = header[len("data:"):].split(";")[0] or None
    return content_type, base64.b64decode(encoded)


def register_catalog_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    registry = ctx.registry
    selection = ctx.selection

    # ---------------------------------------------------------
    # 1. Catalog list
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.CATALOG_LIST, "children"),
        Input(IDs.Store.SELECTION, "data"),
        Input(IDs.Store.CATALOG_VERSION, "data"),
    )
    def render_catalog(_selection_ids, _version):
        return build_catalog_items(registry.list_catalog(), selection.ids(), ctx.role)

    # ---------------------------------------------------------
    # 2. Toggle a dataset in / out of the comparison
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SELECTION, "data", allow_duplicate=True),
        Output(IDs.Store.CATALOG_VERSION, "data", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "is_open", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "color", allow_duplicate=True),
        Input({"type": IDs.Pattern.CATALOG_TOGGLE, "index": ALL}, "n_clicks"),
        State(IDs.Store.CATALOG_VERSION, "data"),
        prevent_initial_call=True,
    )
    def toggle_dataset(_n_clicks, version):
        dataset_id = clicked_index()
        if dataset_id is None:
            raise exceptions.PreventUpdate

        _, failure = run_action(
            lambda: selection.toggle(dataset_id), "Toggle failed", dataset_id=dataset_id,
        )
        if failure is not None:
            # NotFound evicts; bump the version so the list drops it
            return (selection.ids(), (version or 0) + 1) + failure

        return (selection.ids(), dash.no_update) + STATUS_CLOSED

    # ---------------------------------------------------------
    # 3. Refresh
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.CATALOG_VERSION, "data", allow_duplicate=True),
        Output(IDs.Store.SELECTION, "data", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "is_open", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "color", allow_duplicate=True),
        Input(IDs.Control.CATALOG_REFRESH_BTN, "n_clicks"),
        State(IDs.Store.CATALOG_VERSION, "data"),
        prevent_initial_call=True,
    )
    def refresh_catalog(n_clicks, version):
        if not n_clicks:
            raise exceptions.PreventUpdate

        catalog, failure = run_action(registry.refresh_catalog, "Catalog refresh failed")
        if failure is not None:
            return (dash.no_update, dash.no_update) + failure

        return (
            (version or 0) + 1,
            selection.ids(),
        ) + status(f"{len(catalog)} files available.", "info")

    # ---------------------------------------------------------
    # 4. Delete (admin)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.CATALOG_VERSION, "data", allow_duplicate=True),
        Output(IDs.Store.SELECTION, "data", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "is_open", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "color", allow_duplicate=True),
        Input({"type": IDs.Pattern.CATALOG_DELETE, "index": ALL}, "n_clicks"),
        State(IDs.Store.CATALOG_VERSION, "data"),
        prevent_initial_call=True,
    )
    def delete_dataset(_n_clicks, version):
        dataset_id = clicked_index()
        if dataset_id is None:
            raise exceptions.PreventUpdate

        meta = registry.get_meta(dataset_id)
        label = meta.label if meta else dataset_id
        _, failure = run_action(
            lambda: registry.delete(dataset_id, role=ctx.role), "Delete failed", dataset_id=dataset_id,
        )
        if failure is not None:
            return ((version or 0) + 1, selection.ids()) + failure

        return ((version or 0) + 1, selection.ids()) + status(f"Deleted '{label}'.", "success")

    # ---------------------------------------------------------
    # 5. Upload (admin)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.UPLOAD_FILENAME, "children"),
        Input(IDs.Control.UPLOAD, "filename"),
    )
    def show_upload_filename(filename):
        return filename or ""

    @app.callback(
        Output(IDs.Store.CATALOG_VERSION, "data", allow_duplicate=True),
        Output(IDs.Store.SELECTION, "data", allow_duplicate=True),
        Output(IDs.Control.UPLOAD, "contents"),
        Output(IDs.Control.UPLOAD_DISPLAY_NAME, "value"),
        Output(IDs.Control.UPLOAD_DESCRIPTION, "value"),
        Output(IDs.Control.STATUS_BAR, "children", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "is_open", allow_duplicate=True),
        Output(IDs.Control.STATUS_BAR, "color", allow_duplicate=True),
        Input(IDs.Control.UPLOAD_SUBMIT_BTN, "n_clicks"),
        State(IDs.Control.UPLOAD, "contents"),
        State(IDs.Control.UPLOAD, "filename"),
        State(IDs.Control.UPLOAD_DISPLAY_NAME, "value"),
        State(IDs.Control.UPLOAD_DESCRIPTION, "value"),
        State(IDs.Store.CATALOG_VERSION, "data"),
        prevent_initial_call=True,
    )
    def upload_dataset(n_clicks, contents, filename, display_name, description, version):
        if not n_clicks:
            raise exceptions.PreventUpdate

        keep = (dash.no_update, dash.no_update, dash.no_update, dash.no_update, dash.no_update)
        if not contents or not filename:
            return keep + status("Choose a file to upload first.", "secondary")

        try:
            content_type, content = _decode_upload(contents)
        except (ValueError, binascii.Error):
            logger.exception("Could not decode upload", extra={"file_name": filename})
            return keep + status(f"Could not read '{filename}'.", "danger")

        _, failure = run_action(
            lambda: registry.upload(
                content,
                filename,
                role=ctx.role,
                content_type=content_type,
                display_name=display_name,
                description=description,
            ),
            "Upload failed",
            file_name=filename,
        )
        if failure is not None:
            return keep + failure

        return (
            (version or 0) + 1,
            selection.ids(),
            None,
            "",
            "",
        ) + status(f"Uploaded '{filename}'.", "success")
