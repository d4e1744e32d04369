"""
Filter resolution.

The dashboard queries issues with an ordered list of filters: the default
filters first, then any filters named on the entity.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from jira_dashboard.core.config.models import DashboardConfig
from jira_dashboard.core.errors import FilterResolutionError, JiraDashboardError
from jira_dashboard.core.jira.client import JiraClient
from jira_dashboard.core.jira.models import Filter, quote_jql

logger = logging.getLogger(__name__)

OPEN_FILTER = Filter(name="Open Issues", short_name="OPEN", query="resolution = Unresolved")

INCOMING_FILTER = Filter(name="Incoming Issues", short_name="INCOMING", query="status = New")


def username_from_entity_ref(user_entity_ref: str, email_suffix: Optional[str] = None) -> str:
    """
    Jira username for a user entity ref.

    Example:
        >>> username_from_entity_ref("user:default/jdoe", "@example.com")
        'jdoe@example.com'
    """
    name = user_entity_ref.rsplit("/", 1)[-1].split(":", 1)[-1]
    return f"{name}{email_suffix or ''}"


def assigned_to_filter(username: str) -> Filter:
    return Filter(
        name="Assigned to me",
        short_name="ME",
        query=f"assignee = {quote_jql(username)} AND resolution = Unresolved",
    )


def get_default_filters(
    config: DashboardConfig, user_entity_ref: Optional[str] = None
) -> list[Filter]:
    """
    Default filters, parameterized by the caller when known. No I/O.

    Args:
        config: Dashboard configuration (for the e-mail suffix)
        user_entity_ref: Caller's user entity ref, if resolved

    Returns:
        New list of filters; callers may append to it
    """
    filters = [OPEN_FILTER, INCOMING_FILTER]
    if user_entity_ref:
        username = username_from_entity_ref(user_entity_ref, config.jira.user_email_suffix)
        filters.append(assigned_to_filter(username))
    return filters


async def resolve_filter(name: str, config: DashboardConfig, jira: JiraClient) -> Filter:
    """
    Resolve one filter name.

    Configured filters win; a numeric name that is not configured is
    treated as a Jira saved filter id.

    Raises:
        FilterResolutionError: If the name cannot be resolved
    """
    configured = config.find_filter(name)
    if configured is not None:
        return configured

    if not name.isdigit():
        raise FilterResolutionError(name, f"No filter named '{name}' is configured")

    try:
        return await jira.get_saved_filter(name)
    except JiraDashboardError as e:
        raise FilterResolutionError(name, f"Could not load Jira filter {name}: {e}") from e


async def resolve_annotation_filters(
    names: Sequence[str], config: DashboardConfig, jira: JiraClient
) -> list[Filter]:
    """
    Resolve the filter names declared on an entity, in order.

    Raises:
        FilterResolutionError: For the first name that cannot be resolved
    """
    filters = []
    for name in names:
        filters.append(await resolve_filter(name, config, jira))
    logger.debug("Resolved %d annotation filters", len(filters))
    return filters


async def build_filters(
    config: DashboardConfig,
    jira: JiraClient,
    user_entity_ref: Optional[str],
    annotation_names: Sequence[str],
) -> list[Filter]:
    """Default filters followed by the entity's annotation filters."""
    filters = get_default_filters(config, user_entity_ref)
    filters.extend(await resolve_annotation_filters(annotation_names, config, jira))
    return filters
