"""
Jira REST API client.

Wraps the handful of Jira endpoints the dashboard uses:
- GET /rest/api/{v}/project/{key}   - project metadata
- GET /rest/api/{v}/search          - JQL issue search
- GET /rest/api/{v}/filter/{id}     - saved filters
- GET <avatar url>                  - project avatar image (streamed)

Requests share one httpx.AsyncClient. Nothing is retried.
"""

import logging
import re
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from jira_dashboard.core.config.models import JiraConfig
from jira_dashboard.core.errors import NotFoundError, UpstreamError
from jira_dashboard.core.jira.models import Filter, Issue, Project, quote_jql

logger = logging.getLogger(__name__)

ISSUE_FIELDS = [
    "key",
    "summary",
    "status",
    "issuetype",
    "priority",
    "assignee",
    "reporter",
    "created",
    "updated",
    "components",
]
MAX_RESULTS = 50
ORDER_CLAUSE = "ORDER BY updated DESC"

_ORDER_BY = re.compile(r"(?:^|\s+)ORDER\s+BY\b.*$", re.IGNORECASE | re.DOTALL)


def strip_order_by(jql: str) -> str:
    """Drop a trailing ORDER BY so the clause can be AND-ed with others."""
    return _ORDER_BY.sub("", jql.strip()).strip()


def build_filter_jql(project_key: str, filters: Sequence[Filter]) -> str:
    """
    JQL for issues in a project matching every filter.

    Example:
        >>> build_filter_jql("ABC", [Filter(name="Open", query="resolution = Unresolved")])
        'project = "ABC" AND (resolution = Unresolved) ORDER BY updated DESC'
    """
    clauses = [f"project = {quote_jql(project_key)}"]
    predicates = (strip_order_by(f.query) for f in filters)
    # A filter that only sorts (or is blank) adds no condition
    clauses.extend(f"({predicate})" for predicate in predicates if predicate)
    return " AND ".join(clauses) + f" {ORDER_CLAUSE}"


def build_component_jql(project_key: str, components: Sequence[str]) -> str:
    """JQL for issues in a project belonging to any of the components."""
    quoted = ", ".join(quote_jql(c) for c in components)
    return f"project = {quote_jql(project_key)} AND component in ({quoted}) {ORDER_CLAUSE}"


class JiraClient:
    """
    Async client for the Jira REST API.

    Authentication follows JiraConfig: basic auth with e-mail + API token
    when an e-mail is configured, otherwise a bearer token.

    Example:
        >>> async with httpx.AsyncClient(timeout=30.0) as http:
        ...     jira = JiraClient(config.jira, http)
        ...     project = await jira.get_project("ABC")
    """

    def __init__(self, config: JiraConfig, http: httpx.AsyncClient) -> None:
        self.config = config
        self.http = http

    def _auth_kwargs(self) -> dict[str, Any]:
        if not self.config.token:
            return {}
        if self.config.user_email:
            return {"auth": httpx.BasicAuth(self.config.user_email, self.config.token)}
        return {"headers": {"Authorization": f"Bearer {self.config.token}"}}

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.config.api_url}/{path.lstrip('/')}"
        try:
            response = await self.http.get(url, params=params, **self._auth_kwargs())
        except httpx.HTTPError as e:
            raise UpstreamError("jira", f"Jira request failed: {e}", url=url) from e

        if response.status_code == 404:
            raise NotFoundError(f"Jira returned 404 for {path}", url=url)
        if response.is_error:
            raise UpstreamError(
                "jira",
                f"Jira returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
                url=url,
            )
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("jira", f"Invalid JSON from Jira for {path}", url=url) from e

    async def get_project(self, project_key: str) -> Project:
        """
        Fetch project metadata.

        Raises:
            NotFoundError: If Jira has no project with this key
            UpstreamError: On any other failure
        """
        data = await self._get_json(f"project/{project_key}")
        try:
            return Project.model_validate(data)
        except ValidationError as e:
            raise UpstreamError("jira", f"Invalid project payload for {project_key}") from e

    async def search(self, jql: str) -> list[Issue]:
        """Run a JQL search and return the raw issue records."""
        logger.debug("Jira search: %s", jql)
        data = await self._get_json(
            "search",
            params={
                "jql": jql,
                "fields": ",".join(ISSUE_FIELDS),
                "maxResults": MAX_RESULTS,
            },
        )
        issues = data.get("issues", []) if isinstance(data, dict) else []
        return list(issues)

    async def search_issues_by_filters(
        self, project_key: str, filters: Sequence[Filter]
    ) -> list[Issue]:
        return await self.search(build_filter_jql(project_key, filters))

    async def search_issues_by_components(
        self, project_key: str, components: Sequence[str]
    ) -> list[Issue]:
        if not components:
            return []
        return await self.search(build_component_jql(project_key, components))

    async def get_saved_filter(self, filter_id: str) -> Filter:
        """
        Fetch a saved Jira filter.

        Raises:
            NotFoundError: If the filter does not exist (or is not shared)
            UpstreamError: On any other failure
        """
        data = await self._get_json(f"filter/{filter_id}")
        if not isinstance(data, dict):
            raise UpstreamError("jira", f"Invalid payload for filter {filter_id}")

        jql = data.get("jql")
        if not isinstance(jql, str) or not jql.strip():
            raise UpstreamError("jira", f"Filter {filter_id} has no JQL")

        name = data.get("name")
        return Filter(name=name if isinstance(name, str) and name else filter_id, query=jql)

    async def open_image(self, url: str) -> httpx.Response:
        """
        Start streaming an image.

        The returned response has not been read; the caller must close it
        with ``await response.aclose()``.

        Raises:
            UpstreamError: If the request fails or Jira returns an error status
        """
        auth = self._auth_kwargs()
        request = self.http.build_request("GET", url, headers=auth.get("headers"))
        try:
            response = await self.http.send(request, auth=auth.get("auth"), stream=True)
        except httpx.HTTPError as e:
            raise UpstreamError("jira", f"Avatar request failed: {e}", url=url) from e

        if response.is_error:
            await response.aclose()
            raise UpstreamError(
                "jira",
                f"Avatar request returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return response
