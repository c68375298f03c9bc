from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from xls_browser.config.model import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT, GlobalConfig, StoreConfig
from xls_browser.core.exceptions import ConfigError
from xls_browser.core.roles import Role

logger = logging.getLogger(__name__)

STORE_KINDS = ("http", "local")


def _positive_int(raw: Any, name: str, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"'{name}' must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"'{name}' must be positive, got {value}")
    return value


def _positive_float(raw: Any, name: str, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"'{name}' must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"'{name}' must be positive, got {value}")
    return value


def _resolve_root(root: Path, raw: Optional[str]) -> Path:
    # Absolute paths are used as-is; relative ones resolve against the config root.
    if not raw:
        return (root / "store").resolve()
    path = Path(raw)
    if path.is_absolute():
        return path
    return (root / path).resolve()


def _parse_store(root: Path, raw: Mapping[str, Any], env: Mapping[str, str]) -> StoreConfig:
    base_url = env.get("XLS_BROWSER_API_URL") or raw.get("base_url")
    kind = str(raw.get("kind") or ("http" if base_url else "local")).lower()
    if kind not in STORE_KINDS:
        raise ConfigError(f"Unknown store kind '{kind}', expected one of {STORE_KINDS}")

    if kind == "http" and not base_url:
        raise ConfigError("store.base_url (or XLS_BROWSER_API_URL) is required for an http store")

    return StoreConfig(
        kind=kind,
        base_url=base_url,
        token=env.get("XLS_BROWSER_API_TOKEN") or raw.get("token"),
        root=_resolve_root(root, raw.get("root")) if kind == "local" else None,
        timeout=_positive_float(raw.get("timeout"), "store.timeout", DEFAULT_TIMEOUT),
    )


def load_global_config(root: Path, env: Optional[Mapping[str, str]] = None) -> GlobalConfig:
    """
    Load configuration from `root/global.json`, then apply environment
    overrides.

    Expected structure:

        root/
            global.json
            store/            (local store, default location)

    A missing global.json is not an error: the app starts on a local store
    under `root/store` with default titles.

    :param root: config directory
    :param env: environment mapping, defaults to os.environ
    :raises ConfigError: on malformed JSON or invalid values
    """
    env = os.environ if env is None else env
    root = Path(root)

    logger.info(
        "Loading global config",
        extra={"config_root": str(root)},
    )

    global_path = root / "global.json"
    raw_global: Dict[str, Any] = {}
    if global_path.is_file():
        try:
            with global_path.open() as f:
                raw_global = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Malformed {global_path}: {e}") from e
        if not isinstance(raw_global, dict):
            raise ConfigError(f"{global_path} must contain a JSON object")
    else:
        logger.warning(f"No global.json found at {global_path}; using defaults")

    raw_store = raw_global.get("store") or {}
    if not isinstance(raw_store, dict):
        raise ConfigError("'store' must be a JSON object")

    try:
        role = Role.parse(env.get("XLS_BROWSER_ROLE") or raw_global.get("role"), default=Role.USER)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    defaults = GlobalConfig()
    return GlobalConfig(
        ui_title=raw_global.get("ui_title", defaults.ui_title),
        subtitle=raw_global.get("subtitle", defaults.subtitle),
        page_size=_positive_int(raw_global.get("page_size"), "page_size", DEFAULT_PAGE_SIZE),
        role=role,
        store=_parse_store(root, raw_store, env),
    )
