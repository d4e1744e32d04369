"""
Layered configuration loading.

Settings are resolved from, lowest to highest priority:

    built-in defaults
    user file     ~/.config/jira-dashboard/config.json (honours XDG_CONFIG_HOME)
    project file  ./.jira-dashboard.json
    JIRA_DASHBOARD_* environment variables
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import DashboardConfig

logger = logging.getLogger(__name__)

_cached: DashboardConfig | None = None

# Environment variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "JIRA_DASHBOARD_JIRA_BASE_URL": ("jira", "base_url"),
    "JIRA_DASHBOARD_JIRA_TOKEN": ("jira", "token"),
    "JIRA_DASHBOARD_JIRA_USER_EMAIL": ("jira", "user_email"),
    "JIRA_DASHBOARD_JIRA_EMAIL_SUFFIX": ("jira", "user_email_suffix"),
    "JIRA_DASHBOARD_CATALOG_BASE_URL": ("catalog", "base_url"),
    "JIRA_DASHBOARD_CATALOG_TOKEN": ("catalog", "token"),
    "JIRA_DASHBOARD_HOST": ("server", "host"),
}
PORT_ENV = "JIRA_DASHBOARD_PORT"

PROJECT_CONFIG_NAME = ".jira-dashboard.json"


def get_xdg_config_home() -> Path:
    """$XDG_CONFIG_HOME, or ~/.config when it is unset."""
    configured = os.environ.get("XDG_CONFIG_HOME")
    return Path(configured) if configured else Path.home() / ".config"


def get_user_config_path() -> Path:
    return get_xdg_config_home() / "jira-dashboard" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    return (cwd or Path.cwd()) / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively combine two config dicts.

    Sections present in both are merged key by key; any other value
    (lists included) from ``override`` replaces the one in ``base``.
    Neither input is modified.

    Example:
        >>> deep_merge({"jira": {"base_url": "a", "token": "t"}}, {"jira": {"base_url": "b"}})
        {'jira': {'base_url': 'b', 'token': 't'}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Read a JSON object from ``path``.

    Returns None when the file is absent, unreadable, malformed, or holds
    something other than an object. Malformed files are logged.
    """
    if not path.is_file():
        return None

    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring config at %s: expected a JSON object", path)
        return None
    return data


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay JIRA_DASHBOARD_* variables on a config dict.

    String settings are listed in ENV_OVERRIDES; JIRA_DASHBOARD_PORT must
    be an integer and is ignored (with a warning) otherwise.
    """
    overrides: dict[str, Any] = {}

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            overrides.setdefault(section, {})[key] = value

    port = os.environ.get(PORT_ENV)
    if port:
        if port.isdigit():
            overrides.setdefault("server", {})["port"] = int(port)
        else:
            logger.warning("Invalid %s value '%s', ignoring", PORT_ENV, port)

    return deep_merge(config_dict, overrides)


def get_default_config() -> dict[str, Any]:
    """Defaults that are not already expressed by the model fields."""
    return {"filters": []}


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> DashboardConfig:
    """
    Build the effective configuration.

    Args:
        project_dir: Where to look for .jira-dashboard.json (defaults to cwd)
        use_cache: Reuse the configuration from a previous call

    Raises:
        ValidationError: If the merged settings are invalid
    """
    global _cached

    if use_cache and _cached is not None:
        return _cached

    layers = [
        load_json_file(get_user_config_path()),
        load_json_file(get_project_config_path(project_dir)),
    ]

    merged = get_default_config()
    for layer in layers:
        if layer:
            merged = deep_merge(merged, layer)

    _cached = DashboardConfig.model_validate(apply_env_overrides(merged))
    return _cached


def clear_cache() -> None:
    """Forget the cached configuration."""
    global _cached
    _cached = None
