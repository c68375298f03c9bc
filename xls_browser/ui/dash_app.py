from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from xls_browser.config.loader import load_global_config
from xls_browser.core.exceptions import TransientFetchError
from xls_browser.core.export import ExportCoordinator
from xls_browser.core.view_registry import ViewRegistry
from xls_browser.services.dataset_service import DatasetRegistry
from xls_browser.services.selection_service import SelectionSet
from xls_browser.services.snapshot import FigureSnapshotter
from xls_browser.services.store import create_store
from xls_browser.ui.layout.build_layout import build_layout
from xls_browser.ui.callbacks.callbacks_catalog import register_catalog_callbacks
from xls_browser.ui.callbacks.callbacks_render import register_render_callbacks
from xls_browser.ui.callbacks.callbacks_export import register_export_callbacks

logger = logging.getLogger(__name__)


def _build_view_registry() -> ViewRegistry:
    from xls_browser.views import MetricChartView

    registry = ViewRegistry()
    registry.register(MetricChartView)
    return registry


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config = load_global_config(config_root)

    # 2) Initialize Service Layer
    store = create_store(global_config.store)
    registry = DatasetRegistry(store, page_size=global_config.page_size)
    try:
        registry.refresh_catalog()
    except TransientFetchError:
        # Store is down: start with an empty catalog, the user can refresh
        logger.exception("Initial catalog load failed")

    selection = SelectionSet(registry)
    view_registry = _build_view_registry()

    # 3) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        role=global_config.role,
        registry=registry,
        selection=selection,
        view_registry=view_registry,
        snapshotter=FigureSnapshotter(selection=selection, view_registry=view_registry),
        exporter=ExportCoordinator(),
    )
    ctx.validate()

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        suppress_callback_exceptions=True,
    )
    app.title = global_config.ui_title

    app.layout = build_layout(ctx)

    # Register callbacks
    register_catalog_callbacks(app, ctx)
    register_render_callbacks(app, ctx)
    register_export_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"role": ctx.role.value, "store_kind": global_config.store.kind, "n_datasets": len(registry)},
    )
    return app
