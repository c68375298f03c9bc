"""
Config package for xls_browser.

Responsible for:
- config models (GlobalConfig, StoreConfig)
- loading global.json + environment overrides (load_global_config)
"""

from .model import GlobalConfig, StoreConfig
from .loader import load_global_config

__all__ = ["GlobalConfig", "StoreConfig", "load_global_config"]
