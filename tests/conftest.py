"""
Pytest configuration and shared fixtures.

Provides sample catalog entities and Jira payloads, configuration, mocked
collaborators, and a TestClient wired to them.
"""

import copy
import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from jira_dashboard.core.auth import IdentityResolver, TokenManager
from jira_dashboard.core.cache import MemoryCache
from jira_dashboard.core.catalog.client import CatalogClient
from jira_dashboard.core.catalog.models import Entity
from jira_dashboard.core.config import clear_cache
from jira_dashboard.core.config.models import DashboardConfig, JiraConfig
from jira_dashboard.core.dashboard.api.app import create_app
from jira_dashboard.core.dashboard.api.deps import Services
from jira_dashboard.core.jira.client import JiraClient
from jira_dashboard.core.jira.models import Project

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> Any:
    return json.loads((FIXTURES / name).read_text())


def make_issue(key: str, summary: str = "Something is broken") -> dict[str, Any]:
    return {"id": key.split("-")[-1], "key": key, "fields": {"summary": summary}}


# ==============================================================================
# Sample Data Fixtures
# ==============================================================================


@pytest.fixture
def entity_data() -> dict[str, Any]:
    """Raw catalog entity JSON (a fresh copy per test)."""
    return copy.deepcopy(load_fixture("entity.json"))


@pytest.fixture
def entity(entity_data) -> Entity:
    return Entity.model_validate(entity_data)


@pytest.fixture
def project_data() -> dict[str, Any]:
    return copy.deepcopy(load_fixture("jira_project.json"))


@pytest.fixture
def project(project_data) -> Project:
    return Project.model_validate(project_data)


@pytest.fixture
def readme_data() -> dict[str, Any]:
    return copy.deepcopy(load_fixture("readme_content.json"))


# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Every test starts without a cached config."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def config() -> DashboardConfig:
    return DashboardConfig(
        jira=JiraConfig(
            base_url="https://jira.example.com",
            token="jira-token",
            user_email_suffix="@example.com",
        ),
        filters=[
            {"name": "Bugs", "shortName": "BUGS", "field": "issuetype", "value": "Bug"},
            {"name": "Blockers", "query": "priority = Blocker"},
        ],
    )


# ==============================================================================
# Collaborator Fixtures
# ==============================================================================


@pytest.fixture
def catalog(entity) -> AsyncMock:
    """Catalog that knows exactly one entity: component:default/petstore."""
    mock = AsyncMock(spec=CatalogClient)

    async def lookup(ref, token=None):
        return entity if str(ref) == "component:default/petstore" else None

    mock.get_entity_by_ref.side_effect = lookup
    return mock


@pytest.fixture
def jira(project) -> AsyncMock:
    mock = AsyncMock(spec=JiraClient)
    mock.get_project.return_value = project
    mock.search_issues_by_filters.return_value = [make_issue("PET-1"), make_issue("PET-2")]
    mock.search_issues_by_components.return_value = [make_issue("PET-2"), make_issue("PET-3")]
    return mock


@pytest.fixture
def services(config, catalog, jira) -> Services:
    return Services(
        config=config,
        catalog=catalog,
        jira=jira,
        cache=MemoryCache(),
        tokens=TokenManager("service-token"),
        identity=IdentityResolver(),
        http=httpx.AsyncClient(),
    )


@pytest.fixture
def client(services) -> TestClient:
    app = create_app(services=services)
    return TestClient(app, raise_server_exceptions=False)
