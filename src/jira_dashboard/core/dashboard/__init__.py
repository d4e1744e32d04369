"""
Jira dashboard backend.

The dashboard joins two external systems for a catalog entity:
- Catalog (entities and their annotations)
- Jira (projects, issues, saved filters, avatars)

The API layer (api/) exposes the FastAPI endpoints consumed by the
catalog UI.
"""

__all__ = []
