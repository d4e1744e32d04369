"""
Avatar API route.

- GET /avatar/by-entity-ref/{kind}/{namespace}/{name} - Jira project avatar

The image is relayed chunk by chunk with its upstream content type; it is
never buffered whole.
"""

import logging
from collections.abc import AsyncIterator

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from jira_dashboard.core.auth import RequestContext
from jira_dashboard.core.catalog.models import Annotations, EntityRef
from jira_dashboard.core.dashboard.api.deps import (
    Services,
    get_request_context,
    get_services,
    resolve_entity,
)
from jira_dashboard.core.errors import AnnotationMissingError, JiraDashboardError
from jira_dashboard.core.jira.service import get_project_response

logger = logging.getLogger(__name__)

router = APIRouter()


async def relay(upstream: httpx.Response) -> AsyncIterator[bytes]:
    """Yield the upstream body, closing the upstream connection when done."""
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    except httpx.HTTPError as e:
        logger.error("Avatar stream from %s failed: %s", upstream.url, e)
        raise
    finally:
        await upstream.aclose()


@router.get("/avatar/by-entity-ref/{kind}/{namespace}/{name}")
async def get_avatar(
    kind: str,
    namespace: str,
    name: str,
    services: Services = Depends(get_services),
    context: RequestContext = Depends(get_request_context),
) -> StreamingResponse:
    """
    Stream the 48x48 avatar of the entity's Jira project.

    Raises:
        HTTPException: 404 if the entity, its project key or the avatar URL
            is missing; 400 if the project lookup or the image fetch fails
    """
    ref = EntityRef(kind, namespace, name)
    entity = await resolve_entity(services, context, ref)
    annotations = Annotations(entity, services.config.annotations)

    try:
        project_key = annotations.require_project_key()
    except AnnotationMissingError as e:
        logger.info(str(e))
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    try:
        project = await get_project_response(project_key, services.jira, services.cache)
    except JiraDashboardError as e:
        logger.error("Could not find project %s in Jira: %s", project_key, e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"No Jira project found for project key {project_key}",
        )

    url = project.avatar_url
    if not url:
        logger.info("Jira project %s has no 48x48 avatar", project_key)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No avatar found for Jira project {project_key}",
        )

    try:
        upstream = await services.jira.open_image(url)
    except JiraDashboardError as e:
        logger.error("Could not fetch avatar for %s: %s", project_key, e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not fetch avatar for Jira project {project_key}",
        )

    return StreamingResponse(
        relay(upstream),
        media_type=upstream.headers.get("content-type", ""),
        # Closes the upstream even if the client disconnects before the first chunk
        background=BackgroundTask(upstream.aclose),
    )
