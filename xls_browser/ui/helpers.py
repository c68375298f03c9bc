from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List

from dash import dash_table, html

from xls_browser.core.dataset import Dataset, DatasetMeta

TIMESTAMP_PLACEHOLDER = "—"
FONT_STACK = 'system-ui, -apple-system, BlinkMacSystemFont, "SF Pro Text", "Segoe UI", sans-serif'
PRIMARY_COLOR = "#1D6B73"
PRIMARY_DARK = "#155159"


def format_upload_timestamp(timestamp_ms: int) -> str:
    """Date of an upload for display; 0 means "no uploads" and shows a placeholder."""
    if not timestamp_ms:
        return TIMESTAMP_PLACEHOLDER
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def format_count(n: int) -> str:
    return f"{n:,}"


def dataset_caption(meta: DatasetMeta) -> str:
    return f"{format_count(meta.row_count)} rows • {format_upload_timestamp(meta.created_at)}"


def _display_cell(value: Any) -> Any:
    # DataTable can't render nested structures; keep numbers as numbers for sorting
    if value is None or isinstance(value, (str, int, float)):
        return value
    return str(value)


def raw_data_table(ds: Dataset, max_rows: int = 50):
    """
    Build a styled Dash DataTable showing the dataset's rows in header order.
    """
    if ds.payload is None:
        return html.Div("Loading rows…", className="text-muted small")

    if not ds.headers:
        return html.Div("This file has no columns.", className="text-muted small")

    records: List[dict] = [
        {h: _display_cell(row.get(h)) for h in ds.headers}
        for row in ds.rows
    ]

    return dash_table.DataTable(
        data=records,
        columns=[{"name": h, "id": h} for h in ds.headers],

        style_table={
            "overflowX": "auto",
        },
        style_as_list_view=True,
        style_cell={
            "fontFamily": FONT_STACK,
            "fontSize": "12px",
            "padding": "6px 8px",
            "border": "none",
            "textAlign": "left",
            "minWidth": "80px",
            "maxWidth": "260px",
            "whiteSpace": "nowrap",
            "textOverflow": "ellipsis",
        },
        style_header={
            "fontFamily": FONT_STACK,
            "fontSize": "12px",
            "fontWeight": "600",
            "color": "#ffffff",
            "backgroundColor": PRIMARY_COLOR,
            "borderBottom": f"1px solid {PRIMARY_DARK}",
        },
        style_data={
            "borderBottom": "1px solid #e5e7eb",
        },

        page_size=max_rows,
        sort_action="native",
        filter_action="none",
    )
