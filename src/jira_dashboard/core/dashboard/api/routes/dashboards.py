"""
Dashboard API route.

- GET /dashboards/by-entity-ref/{kind}/{namespace}/{name} - project + issues
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
from jira_dashboard.core.errors import (
    AnnotationMissingError,
    FilterResolutionError,
    JiraDashboardError,
)
from jira_dashboard.core.jira.filters import build_filters
from jira_dashboard.core.jira.models import DashboardResponse
from jira_dashboard.core.jira.service import get_issues, get_project_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboards/by-entity-ref/{kind}/{namespace}/{name}")
async def get_dashboard(
    kind: str,
    namespace: str,
    name: str,
    services: Services = Depends(get_services),
    context: RequestContext = Depends(get_request_context),
) -> DashboardResponse:
    """
    Jira project metadata and issues for a catalog entity.

    Issues matching the default and entity filters come first, followed
    by issues in the entity's components. Nothing is deduplicated.

    Raises:
        HTTPException: 404 if the entity, its project key annotation, the
            Jira project or a named filter cannot be found
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
        logger.error("Could not find Jira project %s: %s", project_key, e)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No Jira project found with key {project_key}",
        )

    if context.identity is None:
        logger.warning("Could not find user identity")

    try:
        filters = await build_filters(
            services.config,
            services.jira,
            context.user_entity_ref,
            annotations.filter_names,
        )
    except FilterResolutionError as e:
        logger.error("Filter %s on %s could not be resolved: %s", e.filter_name, ref, e)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not resolve filter '{e.filter_name}': {e}",
        )

    issues = await get_issues(services.jira, project_key, filters, annotations.components)

    return DashboardResponse(project=project.to_response(), data=issues)
