from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from xls_browser.config.model import GlobalConfig
from xls_browser.core.export import ExportCoordinator
from xls_browser.core.roles import Role
from xls_browser.core.view_registry import ViewRegistry
from xls_browser.services.dataset_service import DatasetRegistry
from xls_browser.services.selection_service import SelectionSet
from xls_browser.services.snapshot import FigureSnapshotter


@dataclass
class AppConfig:
    """
    Shared services for the Dash app, passed into layout + callback
    registration instead of living in module-level globals.
    """
    config_root: Path
    global_config: GlobalConfig
    role: Role = Role.USER

    registry: Optional[DatasetRegistry] = None
    selection: Optional[SelectionSet] = None
    view_registry: Optional[ViewRegistry] = None
    snapshotter: Optional[FigureSnapshotter] = None
    exporter: ExportCoordinator = field(default_factory=ExportCoordinator)

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
        if self.selection is None:
            raise RuntimeError("AppConfig.selection must be initialized.")
        if self.view_registry is None:
            raise RuntimeError("AppConfig.view_registry must be initialized.")
        if self.snapshotter is None:
            raise RuntimeError("AppConfig.snapshotter must be initialized.")
