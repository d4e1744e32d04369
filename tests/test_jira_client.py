"""
Tests for the Jira REST client and JQL building.
"""

import httpx
import pytest

from jira_dashboard.core.config.models import JiraConfig
from jira_dashboard.core.errors import NotFoundError, UpstreamError
from jira_dashboard.core.jira.client import (
    JiraClient,
    build_component_jql,
    build_filter_jql,
    strip_order_by,
)
from jira_dashboard.core.jira.models import Filter, Project

# ==============================================================================
# JQL
# ==============================================================================


class TestJql:
    def test_filters_are_anded_in_order(self):
        filters = [
            Filter(name="Open", query="resolution = Unresolved"),
            Filter(name="Bugs", field="issuetype", value="Bug"),
        ]

        assert build_filter_jql("PET", filters) == (
            'project = "PET" AND (resolution = Unresolved) AND (issuetype = "Bug") '
            "ORDER BY updated DESC"
        )

    def test_order_by_is_stripped_from_filters(self):
        filters = [Filter(name="Saved", query="labels = x order by created ASC")]

        assert build_filter_jql("PET", filters).count("ORDER BY") == 1
        assert "created" not in build_filter_jql("PET", filters)

    def test_component_jql(self):
        assert build_component_jql("PET", ["API", 'Odd "name"']) == (
            'project = "PET" AND component in ("API", "Odd \\"name\\"") '
            "ORDER BY updated DESC"
        )

    def test_strip_order_by_leaves_plain_jql(self):
        assert strip_order_by("status = New") == "status = New"

    def test_sort_only_query_adds_no_condition(self):
        filters = [
            Filter(name="Sorted", query="ORDER BY created DESC"),
            Filter(name="Open", query="resolution = Unresolved"),
        ]

        assert strip_order_by("order by created DESC") == ""
        assert build_filter_jql("PET", filters) == (
            'project = "PET" AND (resolution = Unresolved) ORDER BY updated DESC'
        )

    def test_blank_query_adds_no_condition(self):
        filters = [Filter(name="Blank", query="   ")]

        assert build_filter_jql("PET", filters) == 'project = "PET" ORDER BY updated DESC'


class TestFilterModel:
    def test_list_value_renders_in_clause(self):
        f = Filter(name="Team", field="labels", operator="in", value=["a", "b"])
        assert f.query == 'labels in ("a", "b")'

    def test_raw_query_wins(self):
        f = Filter(name="Raw", query="status = Done", field="ignored", value="x")
        assert f.query == "status = Done"

    def test_needs_query_or_predicate(self):
        with pytest.raises(ValueError):
            Filter(name="Empty")


# ==============================================================================
# JiraClient
# ==============================================================================


class Recorder:
    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def make_jira(handler, **config) -> JiraClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JiraClient(JiraConfig(base_url="https://jira.example.com/", **config), http)


class TestJiraClient:
    @pytest.mark.asyncio
    async def test_get_project(self, project_data):
        recorder = Recorder(httpx.Response(200, json=project_data))
        jira = make_jira(recorder, token="pat")

        project = await jira.get_project("PET")

        assert isinstance(project, Project)
        assert project.avatar_url == project_data["avatarUrls"]["48x48"]
        request = recorder.requests[0]
        assert request.url.path == "/rest/api/2/project/PET"
        assert request.headers["authorization"] == "Bearer pat"

    @pytest.mark.asyncio
    async def test_basic_auth_with_email(self, project_data):
        recorder = Recorder(httpx.Response(200, json=project_data))
        jira = make_jira(recorder, token="api-token", user_email="me@example.com")

        await jira.get_project("PET")

        assert recorder.requests[0].headers["authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_unknown_project_raises_not_found(self):
        jira = make_jira(Recorder(httpx.Response(404)))

        with pytest.raises(NotFoundError):
            await jira.get_project("NOPE")

    @pytest.mark.asyncio
    async def test_server_error_raises_upstream_error(self):
        jira = make_jira(Recorder(httpx.Response(502)))

        with pytest.raises(UpstreamError) as exc_info:
            await jira.get_project("PET")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_connection_error_raises_upstream_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamError):
            await make_jira(handler).get_project("PET")

    @pytest.mark.asyncio
    async def test_search_by_filters(self):
        issues = [{"key": "PET-1"}, {"key": "PET-2"}]
        recorder = Recorder(httpx.Response(200, json={"issues": issues, "total": 2}))
        jira = make_jira(recorder)

        result = await jira.search_issues_by_filters(
            "PET", [Filter(name="Open", query="resolution = Unresolved")]
        )

        assert result == issues
        params = recorder.requests[0].url.params
        assert recorder.requests[0].url.path == "/rest/api/2/search"
        assert params["jql"].startswith('project = "PET" AND (resolution = Unresolved)')
        assert params["maxResults"] == "50"
        assert "summary" in params["fields"].split(",")

    @pytest.mark.asyncio
    async def test_search_by_components(self):
        recorder = Recorder(httpx.Response(200, json={"issues": [{"key": "PET-9"}]}))
        jira = make_jira(recorder)

        result = await jira.search_issues_by_components("PET", ["API", "Billing"])

        assert result == [{"key": "PET-9"}]
        assert 'component in ("API", "Billing")' in recorder.requests[0].url.params["jql"]

    @pytest.mark.asyncio
    async def test_search_by_no_components_makes_no_request(self):
        recorder = Recorder(httpx.Response(200, json={"issues": []}))

        assert await make_jira(recorder).search_issues_by_components("PET", []) == []
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_get_saved_filter(self):
        recorder = Recorder(
            httpx.Response(
                200, json={"id": "10001", "name": "Team bugs", "jql": "labels = team"}
            )
        )

        saved = await make_jira(recorder).get_saved_filter("10001")

        assert saved.name == "Team bugs"
        assert saved.query == "labels = team"
        assert recorder.requests[0].url.path == "/rest/api/2/filter/10001"

    @pytest.mark.asyncio
    async def test_open_image_streams(self):
        recorder = Recorder(
            httpx.Response(200, content=b"GIF89a", headers={"content-type": "image/gif"})
        )
        jira = make_jira(recorder)

        response = await jira.open_image("https://jira.example.com/avatar.gif")
        try:
            body = b"".join([chunk async for chunk in response.aiter_bytes()])
        finally:
            await response.aclose()

        assert body == b"GIF89a"
        assert response.headers["content-type"] == "image/gif"

    @pytest.mark.asyncio
    async def test_open_image_error_status(self):
        jira = make_jira(Recorder(httpx.Response(403)))

        with pytest.raises(UpstreamError) as exc_info:
            await jira.open_image("https://jira.example.com/avatar.gif")

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_invalid_project_payload_raises_upstream_error(self):
        jira = make_jira(Recorder(httpx.Response(200, json={"key": "PET"})))

        with pytest.raises(UpstreamError) as exc_info:
            await jira.get_project("PET")

        assert "Invalid project payload" in str(exc_info.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"id": "12345", "name": "Private"},
            {"id": "12345", "name": "Empty", "jql": ""},
            {"id": "12345", "name": "Odd", "jql": 42},
            ["not", "a", "filter"],
        ],
    )
    async def test_saved_filter_without_jql_raises_upstream_error(self, payload):
        jira = make_jira(Recorder(httpx.Response(200, json=payload)))

        with pytest.raises(UpstreamError):
            await jira.get_saved_filter("12345")

    @pytest.mark.asyncio
    async def test_saved_filter_without_name_uses_id(self):
        jira = make_jira(Recorder(httpx.Response(200, json={"jql": "labels = x"})))

        saved = await jira.get_saved_filter("12345")

        assert saved.name == "12345"
