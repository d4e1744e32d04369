"""README payload models."""

from pydantic import BaseModel, ConfigDict, Field


class ReadmeContent(BaseModel):
    """Body of GET /readme/{entity_ref}."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    content: str
    mime_type: str = Field(default="text/markdown", alias="mimeType")
