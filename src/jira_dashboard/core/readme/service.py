"""
Backend README lookup.

An entity's README is fetched as raw content from the directory named by its
source-location annotation, e.g.::

    backstage.io/source-location: url:https://github.com/acme/petstore/tree/main/

GitHub tree URLs are rewritten to raw.githubusercontent.com; other URLs are
expected to serve raw files already.
"""

import logging
import re
from collections.abc import Sequence
from typing import Optional

import httpx

from jira_dashboard.core.errors import NotFoundError, UpstreamError
from jira_dashboard.core.readme.models import ReadmeContent

logger = logging.getLogger(__name__)

_GITHUB_TREE = re.compile(
    r"^https://github\.com/(?P<owner>[^/]+)/(?P<repo>[^/]+)/(?:tree|blob)/(?P<path>.+)$"
)


def raw_base_url(source_location: str) -> str:
    """
    Directory URL that raw files can be fetched from.

    Example:
        >>> raw_base_url("url:https://github.com/acme/petstore/tree/main/")
        'https://raw.githubusercontent.com/acme/petstore/main/'
    """
    location = source_location.strip()
    if location.startswith("url:"):
        location = location[len("url:"):]
    if match := _GITHUB_TREE.match(location):
        location = (
            f"https://raw.githubusercontent.com/"
            f"{match['owner']}/{match['repo']}/{match['path']}"
        )
    if not location.endswith("/"):
        location += "/"
    return location


def _mime_type(name: str, content_type: Optional[str]) -> str:
    if name.lower().endswith(".md"):
        return "text/markdown"
    if content_type:
        return content_type.split(";", 1)[0].strip()
    return "text/plain"


async def fetch_readme(
    source_location: str,
    http: httpx.AsyncClient,
    file_names: Sequence[str],
) -> ReadmeContent:
    """
    Fetch the first README that exists next to the source location.

    Raises:
        NotFoundError: If none of the candidate files exist
        UpstreamError: If the content host fails
    """
    base = raw_base_url(source_location)
    for name in file_names:
        url = base + name
        try:
            response = await http.get(url)
        except httpx.HTTPError as e:
            raise UpstreamError("readme", f"README request failed: {e}", url=url) from e

        if response.status_code == 404:
            logger.debug("No %s at %s", name, base)
            continue
        if response.is_error:
            raise UpstreamError(
                "readme",
                f"README host returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return ReadmeContent(
            name=name,
            content=response.text,
            mime_type=_mime_type(name, response.headers.get("content-type")),
        )

    raise NotFoundError(f"No README found at {base}", tried=list(file_names))
