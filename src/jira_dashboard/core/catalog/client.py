"""
Catalog API client.

Looks entities up by reference through the catalog REST API:
    GET {base_url}/entities/by-name/{kind}/{namespace}/{name}
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from jira_dashboard.core.catalog.models import Entity, EntityRef
from jira_dashboard.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    Read-only client for the software catalog.

    The caller passes the token for each call; the client holds no
    credentials of its own.

    Example:
        >>> async with httpx.AsyncClient() as http:
        ...     catalog = CatalogClient("http://localhost:7007/api/catalog", http)
        ...     entity = await catalog.get_entity_by_ref(ref, token="...")
    """

    def __init__(self, base_url: str, http: httpx.AsyncClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http

    async def get_entity_by_ref(
        self, ref: EntityRef, token: Optional[str] = None
    ) -> Optional[Entity]:
        """
        Fetch an entity.

        Returns:
            The entity, or None if the catalog has no such entity

        Raises:
            UpstreamError: If the catalog request fails or returns garbage
        """
        url = (
            f"{self.base_url}/entities/by-name/"
            f"{quote(ref.kind.lower(), safe='')}/"
            f"{quote(ref.namespace.lower(), safe='')}/"
            f"{quote(ref.name, safe='')}"
        )
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        try:
            response = await self.http.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamError("catalog", f"Catalog request failed: {e}", url=url) from e

        if response.status_code == 404:
            logger.debug("Catalog has no entity %s", ref)
            return None
        if response.is_error:
            raise UpstreamError(
                "catalog",
                f"Catalog returned HTTP {response.status_code} for {ref}",
                status_code=response.status_code,
                url=url,
            )

        try:
            return Entity.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamError("catalog", f"Invalid entity payload for {ref}", url=url) from e
