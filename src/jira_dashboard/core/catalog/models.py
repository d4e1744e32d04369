"""
Catalog entity models.

Entities are owned by the software catalog; this module only models the
parts the dashboard reads: the reference triple and the annotations.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from jira_dashboard.core.config.models import AnnotationsConfig
from jira_dashboard.core.errors import AnnotationMissingError

DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True)
class EntityRef:
    """
    A (kind, namespace, name) triple identifying a catalog item.

    Example:
        >>> str(EntityRef("Component", "default", "petstore"))
        'component:default/petstore'
        >>> EntityRef.parse("petstore", default_kind="component")
        EntityRef(kind='component', namespace='default', name='petstore')
    """

    kind: str
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.kind.lower()}:{self.namespace.lower()}/{self.name}"

    @classmethod
    def parse(
        cls,
        ref: str,
        default_kind: Optional[str] = None,
        default_namespace: str = DEFAULT_NAMESPACE,
    ) -> "EntityRef":
        """
        Parse ``[kind:][namespace/]name``.

        Raises:
            ValueError: If the reference is empty or has no kind and no
                default kind is given
        """
        kind: Optional[str] = default_kind
        namespace = default_namespace
        rest = ref.strip()

        if ":" in rest:
            kind, rest = rest.split(":", 1)
        if "/" in rest:
            namespace, rest = rest.split("/", 1)

        if not kind or not namespace or not rest:
            raise ValueError(f"Invalid entity reference: '{ref}'")
        return cls(kind=kind, namespace=namespace, name=rest)


class EntityMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    namespace: str = DEFAULT_NAMESPACE
    annotations: dict[str, str] = Field(default_factory=dict)


class Entity(BaseModel):
    """A catalog entity as returned by the catalog API."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: Optional[str] = Field(default=None, alias="apiVersion")
    kind: str
    metadata: EntityMetadata
    spec: dict[str, Any] = Field(default_factory=dict)

    @property
    def ref(self) -> EntityRef:
        return EntityRef(self.kind, self.metadata.namespace, self.metadata.name)


def split_annotation(value: Optional[str]) -> list[str]:
    """Split a comma-separated annotation value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Annotations:
    """
    The dashboard's view of an entity's annotations.

    Only the configured annotation names are exposed. Optional values come
    back as None; required values go through ``require_project_key`` which
    raises instead of returning None.
    """

    def __init__(self, entity: Entity, names: AnnotationsConfig) -> None:
        self._values = entity.metadata.annotations
        self._names = names
        self._ref = entity.ref

    def get(self, annotation: str) -> Optional[str]:
        value = self._values.get(annotation)
        return value.strip() if value and value.strip() else None

    @property
    def project_key(self) -> Optional[str]:
        return self.get(self._names.project_key)

    def require_project_key(self) -> str:
        """
        Raises:
            AnnotationMissingError: If the project key annotation is absent
        """
        key = self.project_key
        if key is None:
            raise AnnotationMissingError(
                self._names.project_key,
                f"No {self._names.project_key} annotation found for {self._ref}",
            )
        return key

    @property
    def components(self) -> list[str]:
        """Primary and alternate component annotations, concatenated."""
        return split_annotation(self.get(self._names.components)) + split_annotation(
            self.get(self._names.component_alternate)
        )

    @property
    def filter_names(self) -> list[str]:
        return split_annotation(self.get(self._names.filters))

    @property
    def source_location(self) -> Optional[str]:
        return self.get(self._names.source_location)
