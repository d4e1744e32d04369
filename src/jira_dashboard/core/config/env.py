"""
.env support for secrets.

Jira and catalog tokens are usually kept in .env files rather than in the
JSON config. Files are read with python-dotenv and merged as

    user .env  <  project .env  <  variables already in os.environ

so a shell export always wins.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)


def user_env_path() -> Path:
    return get_xdg_config_home() / "jira-dashboard" / ".env"


def read_env_files(paths: Iterable[Path]) -> dict[str, str]:
    """Values from the given .env files; later files win, unset keys are skipped."""
    merged: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        merged.update(
            {key: value for key, value in dotenv_values(path).items() if value is not None}
        )
    return merged


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> list[str]:
    """
    Export values from the user and project .env files.

    Args:
        project_dir: Directory holding the project .env (defaults to cwd)
        user_env_paths: Override the user .env locations
        project_env_paths: Override the project .env locations

    Returns:
        Names of the variables that were set
    """
    if user_env_paths is None:
        user_env_paths = [user_env_path()]
    if project_env_paths is None:
        project_env_paths = [(project_dir or Path.cwd()) / ".env"]

    values = read_env_files([*user_env_paths, *project_env_paths])

    applied = [key for key in values if key not in os.environ]
    for key in applied:
        os.environ[key] = values[key]

    if applied:
        logger.debug("Loaded %d variables from .env files", len(applied))
    return applied
