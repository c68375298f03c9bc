from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from xls_browser.core.roles import Role

DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0


@dataclass
class StoreConfig:
    """
    Where the dataset catalog lives.

    - kind: "http" for the remote dataset store, "local" for a directory of
      JSON documents
    - base_url: API root of the remote store (http only)
    - token: bearer token sent with every request (http only)
    - root: directory of the local store, resolved against the config root
    - timeout: per-request timeout in seconds (http only)
    """
    kind: str = "local"
    base_url: Optional[str] = None
    token: Optional[str] = None
    root: Optional[Path] = None
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class GlobalConfig:
    ui_title: str = "Spreadsheet Browser"
    subtitle: str = "Compare uploaded spreadsheets side by side"
    page_size: int = DEFAULT_PAGE_SIZE
    role: Role = Role.USER
    store: StoreConfig = field(default_factory=StoreConfig)
