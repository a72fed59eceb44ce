from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_editor.utils.utils import normalise_tags


class DeleteArticleRequest(BaseModel):
    """JSON payload sent to DELETE /api/articles/{filename}."""

    model_config = ConfigDict(extra="ignore")

    sha: str | None = Field(default=None, description="Version token of the file being deleted.")


class SaveArticleRequest(BaseModel):
    """JSON payload sent to PUT /api/articles/{filename}."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field("", description="Post title.")
    author: str = Field("", description="Post author.")
    tags: list[str] = Field(default_factory=list, description="Post tags, a list or a separated string.")
    content: str = Field("", description="Markdown body without front matter.")
    sha: str | None = Field(default=None, description="Version token of the file being replaced.")

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> list[str]:
        return normalise_tags(value)
