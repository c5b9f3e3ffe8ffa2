"""Where servstore keeps its settings and ledger, and how settings are resolved.

Settings are one JSON file holding a :class:`~servstore.models.GlobalConfig`;
the cache ledger lives in the cache directory. Both follow the XDG layout on
Linux/BSD and sit under ``~/.servstore`` elsewhere.
:func:`resolve_client_config` applies ``SERVSTORE_APP_URL`` on top of the
file.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Optional

from servstore.exceptions import ConfigError
from servstore.models import ClientConfig, GlobalConfig

APP_NAME = "servstore"

APP_URL_ENV = "SERVSTORE_APP_URL"
"""Environment variable holding the application URL; the API lives at ``<url>/api``."""


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: str, fallback: str) -> Path:
    """``$<xdg_var>/servstore`` on XDG platforms, ``~/.servstore/<fallback>`` elsewhere.

    The directory is created if missing.
    """
    if _is_xdg_platform():
        path = Path(os.environ.get(xdg_var) or Path.home() / xdg_default) / APP_NAME
    else:
        path = Path.home() / f".{APP_NAME}" / fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    return _app_dir("XDG_CONFIG_HOME", ".config", "")


def get_cache_dir() -> Path:
    """Directory of the persisted cache ledger.

    Deleting it is always safe: every endpoint then counts as a cache miss.
    """
    return _app_dir("XDG_CACHE_HOME", ".cache", "cache")


def get_download_dir(config: Optional[ClientConfig] = None) -> Path:
    """Directory downloads are saved to, created if missing.

    ``config.download_dir`` wins, then ``$XDG_DOWNLOAD_DIR``, then ``~/Downloads``.
    """
    if config is not None and config.download_dir:
        path = Path(config.download_dir).expanduser()
    else:
        path = Path(os.environ.get("XDG_DOWNLOAD_DIR") or Path.home() / "Downloads")
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_path() -> Path:
    return get_config_dir() / "config.json"


def load_global_config() -> GlobalConfig:
    """Read the settings file; defaults when it does not exist.

    Raises:
        ConfigError: The file is not valid JSON or does not validate.
    """
    path = config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate_json(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Write the settings file, replacing the old one in a single rename."""
    path = config_path()
    staging = path.with_name(f".{path.name}.tmp")
    staging.write_text(config.model_dump_json(indent=2) + "\n", encoding="utf-8")
    os.replace(staging, path)


def resolve_client_config(global_cfg: Optional[GlobalConfig] = None) -> ClientConfig:
    """Effective client settings: the settings file, then ``SERVSTORE_APP_URL``.

    *global_cfg* is read from disk when omitted and is never modified.
    """
    client = (global_cfg or load_global_config()).client.model_copy(deep=True)
    app_url = os.environ.get(APP_URL_ENV)
    if app_url:
        client.base_url = f"{app_url.rstrip('/')}/api"
    return client
