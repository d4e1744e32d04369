"""
README API route.

- GET /readme/{entity_ref} - README content for an entity
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from jira_dashboard.core.auth import RequestContext
from jira_dashboard.core.catalog.models import Annotations, EntityRef
from jira_dashboard.core.dashboard.api.deps import (
    Services,
    get_request_context,
    get_services,
    resolve_entity,
)
from jira_dashboard.core.errors import NotFoundError, UpstreamError
from jira_dashboard.core.readme.models import ReadmeContent
from jira_dashboard.core.readme.service import fetch_readme

logger = logging.getLogger(__name__)

router = APIRouter()


# entity_ref contains ':' and '/', so it is matched as a path
@router.get("/readme/{entity_ref:path}")
async def get_readme(
    entity_ref: str,
    services: Services = Depends(get_services),
    context: RequestContext = Depends(get_request_context),
) -> ReadmeContent:
    """
    Raises:
        HTTPException: 400 for a malformed entity ref; 404 if the entity,
            its source location or the README is missing; 502 if the
            content host fails
    """
    try:
        ref = EntityRef.parse(entity_ref, default_kind="component")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    entity = await resolve_entity(services, context, ref)
    annotations = Annotations(entity, services.config.annotations)

    location = annotations.source_location
    if location is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {services.config.annotations.source_location} annotation found for {ref}",
        )

    try:
        return await fetch_readme(location, services.http, services.config.readme.file_names)
    except NotFoundError as e:
        logger.info("No README for %s: %s", ref, e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except UpstreamError as e:
        logger.error("README fetch for %s failed: %s", ref, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not fetch README for {ref}",
        )
