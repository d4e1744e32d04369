"""
Configuration models and loading.

This module provides Pydantic models for jira-dashboard configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import (
    PROJECT_CACHE_TTL_MS,
    AnnotationsConfig,
    CatalogConfig,
    DashboardConfig,
    JiraConfig,
    ReadmeConfig,
    ServerConfig,
)

__all__ = [
    # Models
    "AnnotationsConfig",
    "CatalogConfig",
    "DashboardConfig",
    "JiraConfig",
    "ReadmeConfig",
    "ServerConfig",
    "PROJECT_CACHE_TTL_MS",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
]
