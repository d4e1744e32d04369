"""
Configuration data models for jira-dashboard.

These models define the structure of .jira-dashboard.json and
~/.config/jira-dashboard/config.json files, with validation and type
safety via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jira_dashboard.core.jira.models import Filter

# Project metadata is cached for one minute. Not configurable.
PROJECT_CACHE_TTL_MS = 60_000


class JiraConfig(BaseModel):
    """
    Connection details for the Jira REST API.

    When ``user_email`` is set, requests use basic auth (Jira Cloud
    e-mail + API token); otherwise the token is sent as a bearer token
    (Jira Server/Data Center personal access token).
    """
    base_url: str = Field(
        default="http://localhost:8080",
        description="Jira base URL, e.g. https://example.atlassian.net"
    )
    token: Optional[str] = Field(
        default=None,
        description="API token or personal access token"
    )
    user_email: Optional[str] = Field(
        default=None,
        description="Account e-mail used with the token for basic auth"
    )
    api_version: str = Field(
        default="2",
        description="REST API version used in /rest/api/{version}"
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to every upstream request"
    )
    user_email_suffix: Optional[str] = Field(
        default=None,
        description="Suffix appended to user entity names to form Jira usernames"
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/rest/api/{self.api_version}"


class CatalogConfig(BaseModel):
    """Where to find the software catalog, and the service token to use."""
    base_url: str = Field(
        default="http://localhost:7007/api/catalog",
        description="Catalog API base URL"
    )
    token: Optional[str] = Field(
        default=None,
        description="Service token sent to the catalog"
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AnnotationsConfig(BaseModel):
    """
    Names of the entity annotations the dashboard reads.

    ``component_alternate`` supports the naming convention used by other
    Jira catalog plugins.
    """
    project_key: str = Field(default="jira.com/project-key")
    components: str = Field(default="jira.com/components")
    component_alternate: str = Field(default="jira/component")
    filters: str = Field(default="jira.com/filter-ids")
    source_location: str = Field(default="backstage.io/source-location")


class ReadmeConfig(BaseModel):
    """README lookup settings."""
    file_names: list[str] = Field(
        default_factory=lambda: ["README.md", "README", "readme.md"],
        min_length=1,
        description="Candidate README file names, tried in order"
    )


class ServerConfig(BaseModel):
    """HTTP server settings used by `jira-dashboard serve`."""
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=7008, ge=1, le=65535)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"]
    )


class DashboardConfig(BaseModel):
    """
    Complete jira-dashboard configuration.

    Loaded by merging (in order of precedence):
    1. Environment variables (JIRA_DASHBOARD_*)
    2. Project config (.jira-dashboard.json)
    3. User config (~/.config/jira-dashboard/config.json)
    4. Hardcoded defaults
    """
    model_config = ConfigDict(validate_assignment=True)

    jira: JiraConfig = Field(default_factory=JiraConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    annotations: AnnotationsConfig = Field(default_factory=AnnotationsConfig)
    filters: list[Filter] = Field(
        default_factory=list,
        description="Named filters that entities can reference by name"
    )
    readme: ReadmeConfig = Field(default_factory=ReadmeConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    def find_filter(self, name: str) -> Optional[Filter]:
        """Look up a configured filter by name or short name."""
        for candidate in self.filters:
            if name in (candidate.name, candidate.short_name):
                return candidate
        return None
