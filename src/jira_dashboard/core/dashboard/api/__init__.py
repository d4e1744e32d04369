"""
FastAPI application for the Jira dashboard backend.

API Endpoints:
- GET /health - Health check
- GET /dashboards/by-entity-ref/{kind}/{namespace}/{name} - Project and issues
- GET /avatar/by-entity-ref/{kind}/{namespace}/{name} - Project avatar image
- GET /readme/{entity_ref} - Entity README

Usage:
    # Run the server
    uvicorn jira_dashboard.core.dashboard.api.app:create_app --factory --reload

    # Or from Python
    from jira_dashboard.core.dashboard.api.app import create_app
"""

from jira_dashboard.core.dashboard.api.app import create_app

__all__ = ["create_app"]
