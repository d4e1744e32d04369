"""
Client for the README endpoint:
    GET {base_url}/readme/{entity_ref}
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from jira_dashboard.core.catalog.models import EntityRef
from jira_dashboard.core.errors import ReadmeFetchError
from jira_dashboard.core.readme.models import ReadmeContent

logger = logging.getLogger(__name__)


class ReadmeClient:
    """
    Fetch README content for an entity from the dashboard backend.

    Example:
        >>> async with httpx.AsyncClient() as http:
        ...     client = ReadmeClient("http://localhost:7008", http)
        ...     readme = await client.get_readme(EntityRef.parse("component:default/petstore"))
    """

    def __init__(
        self, base_url: str, http: httpx.AsyncClient, token: Optional[str] = None
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http
        self.token = token

    async def get_readme(self, ref: EntityRef) -> Optional[ReadmeContent]:
        """
        Returns:
            The README, or None if the entity has none

        Raises:
            ReadmeFetchError: If the request fails or the response is invalid
        """
        url = f"{self.base_url}/readme/{quote(str(ref), safe='')}"
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}

        try:
            response = await self.http.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise ReadmeFetchError(f"Could not reach {self.base_url}: {e}", url=url) from e

        if response.status_code == 404:
            logger.debug("No README at %s", url)
            return None
        if response.is_error:
            raise ReadmeFetchError(
                f"README request failed with HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return ReadmeContent.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ReadmeFetchError("README response was not valid", url=url) from e
