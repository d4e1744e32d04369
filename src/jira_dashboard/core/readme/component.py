"""
README fetch component.

Fetches the README of the entity in view and renders it with Rich. The
component goes through one of these transitions, driven by a single fetch:

    loading -> success | empty | error

There is no retry or polling. Closing the component cancels a fetch that
is still in flight.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rich.console import RenderableType
from rich.markdown import Markdown
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text

from jira_dashboard.core.catalog.models import EntityRef
from jira_dashboard.core.errors import ReadmeFetchError
from jira_dashboard.core.readme.client import ReadmeClient
from jira_dashboard.core.readme.models import ReadmeContent

logger = logging.getLogger(__name__)

README_TEST_ID = "readme-content"


class ViewState(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class RenderedView:
    """A rendered component state. ``test_id`` marks the README content."""

    state: ViewState
    renderable: RenderableType
    test_id: Optional[str] = None


class FetchComponent:
    """
    Render an entity's README.

    Example:
        >>> async with FetchComponent(ref, client) as component:
        ...     view = await component.load()
        ...     console.print(view.renderable)
    """

    def __init__(self, entity_ref: EntityRef, client: ReadmeClient) -> None:
        self.entity_ref = entity_ref
        self.client = client
        self.state = ViewState.LOADING
        self.readme: Optional[ReadmeContent] = None
        self.error: Optional[str] = None
        self._task: Optional[asyncio.Task[Optional[ReadmeContent]]] = None
        self._closed = False

    async def __aenter__(self) -> "FetchComponent":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    async def load(self) -> RenderedView:
        """Run the fetch (once) and return the resulting view."""
        if self._task is None:
            self._task = asyncio.ensure_future(self.client.get_readme(self.entity_ref))

        try:
            readme = await self._task
        except asyncio.CancelledError:
            if not self._closed:
                raise
            logger.debug("README fetch for %s cancelled", self.entity_ref)
            return self.render()
        except ReadmeFetchError as e:
            logger.error("Failed to load README for %s: %s", self.entity_ref, e)
            self.state = ViewState.ERROR
            self.error = str(e)
            return self.render()

        if readme is None:
            self.state = ViewState.EMPTY
        else:
            self.state = ViewState.SUCCESS
            self.readme = readme
        return self.render()

    def close(self) -> None:
        """Tear down, cancelling the fetch if it has not finished."""
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def render(self) -> RenderedView:
        if self.state is ViewState.SUCCESS and self.readme is not None:
            body: RenderableType
            if self.readme.mime_type == "text/markdown":
                body = Markdown(self.readme.content)
            else:
                body = Text(self.readme.content)
            return RenderedView(
                state=self.state,
                renderable=Panel(body, title=self.readme.name, border_style="cyan"),
                test_id=README_TEST_ID,
            )

        if self.state is ViewState.ERROR:
            return RenderedView(
                state=self.state,
                renderable=Panel(
                    Text(f"Error loading README: {self.error}", style="red"),
                    title="README",
                    border_style="red",
                ),
            )

        if self.state is ViewState.EMPTY:
            return RenderedView(
                state=self.state,
                renderable=Panel(
                    Text(f"No README found for {self.entity_ref}", style="dim"),
                    title="README",
                ),
            )

        return RenderedView(
            state=self.state,
            renderable=Spinner("dots", text="Loading README..."),
        )
