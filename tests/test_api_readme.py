"""Tests for GET /readme/{entity_ref}."""

from urllib.parse import quote

import httpx
import pytest
from fastapi.testclient import TestClient

from jira_dashboard.core.dashboard.api.app import create_app

RAW_BASE = "https://raw.githubusercontent.com/acme/petstore/main/"


def readme_url(ref: str) -> str:
    return f"/readme/{quote(ref, safe='')}"


@pytest.fixture
def raw_files() -> dict[str, httpx.Response]:
    return {RAW_BASE + "README.md": httpx.Response(200, text="# Petstore\n")}


@pytest.fixture
def readme_client(services, raw_files) -> TestClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return raw_files.get(str(request.url), httpx.Response(404))

    services.http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TestClient(create_app(services=services), raise_server_exceptions=False)


class TestReadmeEndpoint:
    def test_returns_readme(self, readme_client):
        response = readme_client.get(readme_url("component:default/petstore"))

        assert response.status_code == 200
        assert response.json() == {
            "name": "README.md",
            "content": "# Petstore\n",
            "mimeType": "text/markdown",
        }

    def test_short_ref_defaults_to_component(self, readme_client, catalog):
        response = readme_client.get(readme_url("petstore"))

        assert response.status_code == 200
        assert str(catalog.get_entity_by_ref.call_args.args[0]) == "component:default/petstore"

    def test_falls_back_to_other_file_names(self, readme_client, raw_files):
        raw_files.clear()
        raw_files[RAW_BASE + "README"] = httpx.Response(
            200, text="plain readme", headers={"content-type": "text/plain; charset=utf-8"}
        )

        response = readme_client.get(readme_url("component:default/petstore"))

        assert response.status_code == 200
        assert response.json()["name"] == "README"
        assert response.json()["mimeType"] == "text/plain"

    def test_no_readme_is_404(self, readme_client, raw_files):
        raw_files.clear()

        response = readme_client.get(readme_url("component:default/petstore"))

        assert response.status_code == 404

    def test_missing_source_location_is_404(self, readme_client, entity):
        del entity.metadata.annotations["backstage.io/source-location"]

        response = readme_client.get(readme_url("component:default/petstore"))

        assert response.status_code == 404
        assert "backstage.io/source-location" in response.json()["error"]

    def test_unknown_entity_is_404(self, readme_client):
        response = readme_client.get(readme_url("component:default/unknown"))

        assert response.status_code == 404

    def test_content_host_failure_is_502(self, readme_client, raw_files):
        raw_files[RAW_BASE + "README.md"] = httpx.Response(500)

        response = readme_client.get(readme_url("component:default/petstore"))

        assert response.status_code == 502
        assert response.json()["error_code"] == "UPSTREAM_ERROR"
