from __future__ import annotations

__all__ = ["IDs", "catalog_toggle_id", "catalog_delete_id", "table_close_id", "chart_download_id"]


class IDs:
    class Store:
        SELECTION = "selection-ids"
        CATALOG_VERSION = "catalog-version"
        COMPARISON_STATE = "comparison-state"

    class Control:
        # Banner / roll-up
        ROLLUP_AVAILABLE = "rollup-available"
        ROLLUP_SELECTED = "rollup-selected"
        ROLLUP_ROWS = "rollup-rows"
        ROLLUP_LATEST = "rollup-latest"

        # Catalog
        CATALOG_LIST = "catalog-list"
        CATALOG_REFRESH_BTN = "catalog-refresh-btn"

        # Upload (admin)
        UPLOAD = "upload-file"
        UPLOAD_FILENAME = "upload-filename"
        UPLOAD_DISPLAY_NAME = "upload-display-name"
        UPLOAD_DESCRIPTION = "upload-description"
        UPLOAD_SUBMIT_BTN = "upload-submit-btn"

        # Comparison
        METRIC_SELECT = "metric-select"
        CHARTS_CONTAINER = "charts-container"
        TABLES_CONTAINER = "tables-container"
        DOWNLOAD_CHART = "download-chart"

        # Status bar
        STATUS_BAR = "status-bar"

    class Pattern:
        # pattern-matching "type" strings
        CATALOG_TOGGLE = "catalog-toggle"
        CATALOG_DELETE = "catalog-delete"
        TABLE_CLOSE = "table-close"
        CHART_DOWNLOAD = "chart-download"


def catalog_toggle_id(dataset_id: str) -> dict:
    return {"type": IDs.Pattern.CATALOG_TOGGLE, "index": dataset_id}


def catalog_delete_id(dataset_id: str) -> dict:
    return {"type": IDs.Pattern.CATALOG_DELETE, "index": dataset_id}


def table_close_id(dataset_id: str) -> dict:
    return {"type": IDs.Pattern.TABLE_CLOSE, "index": dataset_id}


def chart_download_id(dataset_id: str) -> dict:
    return {"type": IDs.Pattern.CHART_DOWNLOAD, "index": dataset_id}
