"""
Dashboard queries on top of the Jira client: the cached project lookup and
the issue aggregation.
"""

import asyncio
import logging
from collections.abc import Sequence

from jira_dashboard.core.cache import CacheClient, read_through
from jira_dashboard.core.config.models import PROJECT_CACHE_TTL_MS
from jira_dashboard.core.jira.client import JiraClient
from jira_dashboard.core.jira.models import Filter, Issue, Project

logger = logging.getLogger(__name__)


def project_cache_key(project_key: str) -> str:
    return f"jira-dashboard:project:{project_key}"


async def get_project_response(
    project_key: str, jira: JiraClient, cache: CacheClient
) -> Project:
    """
    Project metadata through the read-through cache.

    Successful lookups are cached for PROJECT_CACHE_TTL_MS; failures
    propagate and are not cached.
    """

    async def fetch() -> dict:
        project = await jira.get_project(project_key)
        return project.model_dump(by_alias=True, exclude_none=True)

    data = await read_through(
        cache, project_cache_key(project_key), fetch, ttl_ms=PROJECT_CACHE_TTL_MS
    )
    return Project.model_validate(data)


async def get_issues(
    jira: JiraClient,
    project_key: str,
    filters: Sequence[Filter],
    components: Sequence[str],
) -> list[Issue]:
    """
    Issues matching the filters, followed by issues in the components.

    The two queries run concurrently; if one fails the other is cancelled.
    Results are concatenated without removing issues that appear in both.
    """
    searches = [
        asyncio.ensure_future(jira.search_issues_by_filters(project_key, filters)),
        asyncio.ensure_future(jira.search_issues_by_components(project_key, components)),
    ]
    try:
        filter_issues, component_issues = await asyncio.gather(*searches)
    except Exception:
        for search in searches:
            search.cancel()
        raise
    logger.debug(
        "Project %s: %d filter issues, %d component issues",
        project_key,
        len(filter_issues),
        len(component_issues),
    )
    return filter_issues + component_issues
