"""
Jira integration: REST client, filters, and the cached project service.
"""
