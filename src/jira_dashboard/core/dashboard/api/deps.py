"""
Shared route dependencies.

Collaborators live in a Services container stored on ``app.state``; each
request derives a RequestContext from it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request, status

from jira_dashboard.core.auth import IdentityResolver, RequestContext, TokenManager
from jira_dashboard.core.cache import CacheClient, MemoryCache
from jira_dashboard.core.catalog.client import CatalogClient
from jira_dashboard.core.catalog.models import Entity, EntityRef
from jira_dashboard.core.config.models import PROJECT_CACHE_TTL_MS, DashboardConfig
from jira_dashboard.core.jira.client import JiraClient

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the routes talk to."""

    config: DashboardConfig
    catalog: CatalogClient
    jira: JiraClient
    cache: CacheClient
    tokens: TokenManager
    identity: IdentityResolver
    http: httpx.AsyncClient

    @classmethod
    def from_config(
        cls, config: DashboardConfig, http: Optional[httpx.AsyncClient] = None
    ) -> "Services":
        """Build the default collaborators around one shared HTTP client."""
        if http is None:
            http = httpx.AsyncClient(timeout=config.jira.timeout_seconds)
        return cls(
            config=config,
            catalog=CatalogClient(config.catalog.base_url, http),
            jira=JiraClient(config.jira, http),
            cache=MemoryCache(default_ttl_ms=PROJECT_CACHE_TTL_MS),
            tokens=TokenManager(config.catalog.token),
            identity=IdentityResolver(),
            http=http,
        )


def get_services(request: Request) -> Services:
    services: Services = request.app.state.services
    return services


async def get_request_context(
    request: Request, services: Services = Depends(get_services)
) -> RequestContext:
    token = await services.tokens.get_token()
    identity = await services.identity.get_identity(request)
    return RequestContext(service_token=token, identity=identity)


async def resolve_entity(
    services: Services, context: RequestContext, ref: EntityRef
) -> Entity:
    """
    Look an entity up in the catalog.

    Raises:
        HTTPException: 404 if the catalog has no such entity
    """
    entity = await services.catalog.get_entity_by_ref(ref, token=context.service_token)
    if entity is None:
        logger.info("No entity found for %s", ref)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No entity found for {ref}",
        )
    return entity
