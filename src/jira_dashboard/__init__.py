"""
jira-dashboard - Jira issues for software catalog entities.

A FastAPI backend that aggregates Jira project and issue data for catalog
entities, proxies project avatars, and serves entity READMEs, plus a Rich
terminal view of an entity's README.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from jira_dashboard.core.catalog.models import Entity, EntityRef
from jira_dashboard.core.config.models import DashboardConfig

__all__ = ["DashboardConfig", "Entity", "EntityRef", "__version__"]
