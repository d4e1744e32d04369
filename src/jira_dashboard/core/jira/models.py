"""
Jira data models.

Projects are validated loosely: only the fields the dashboard relies on are
declared and everything else Jira returns is kept as extra data. Issues are
passed through as opaque JSON records.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Issues are opaque records returned by Jira search
Issue = dict[str, Any]

AVATAR_SIZE = "48x48"

# Operators whose value is a list rendered as ("a", "b")
_LIST_OPERATORS = {"in", "not in"}


def quote_jql(value: str) -> str:
    """Quote a value for use inside a JQL clause."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class Project(BaseModel):
    """Jira project metadata as returned by GET /project/{key}."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: str
    name: str
    id: Optional[str] = None
    avatar_urls: dict[str, str] = Field(default_factory=dict, alias="avatarUrls")
    project_type_key: Optional[str] = Field(default=None, alias="projectTypeKey")
    lead: Optional[dict[str, Any]] = None
    self_url: Optional[str] = Field(default=None, alias="self")

    @property
    def avatar_url(self) -> Optional[str]:
        """URL of the 48x48 project avatar, if Jira reported one."""
        return self.avatar_urls.get(AVATAR_SIZE)

    def to_response(self) -> dict[str, Any]:
        """Serialize with Jira's own field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Filter(BaseModel):
    """
    A named predicate applied when querying issues.

    A filter is declared either with a raw JQL ``query`` or with a
    ``(field, operator, value)`` triple which is rendered to JQL.

    Example:
        >>> Filter(name="Bugs", field="issuetype", operator="=", value="Bug").query
        'issuetype = "Bug"'
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    short_name: Optional[str] = Field(default=None, alias="shortName")
    query: str = ""
    field: Optional[str] = None
    operator: str = "="
    value: Optional[str | list[str]] = None

    @model_validator(mode="after")
    def _render_query(self) -> "Filter":
        if self.query:
            return self
        if not self.field or self.value is None:
            raise ValueError(
                f"Filter '{self.name}' needs either a query or a field and value"
            )
        if isinstance(self.value, list) or self.operator.lower() in _LIST_OPERATORS:
            values = self.value if isinstance(self.value, list) else [self.value]
            rendered = "(" + ", ".join(quote_jql(v) for v in values) + ")"
        else:
            rendered = quote_jql(self.value)
        self.query = f"{self.field} {self.operator} {rendered}"
        return self


class DashboardResponse(BaseModel):
    """Body of GET /dashboards/by-entity-ref/..."""

    project: dict[str, Any]
    data: list[Issue]
