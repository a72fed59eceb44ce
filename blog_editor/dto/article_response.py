from pydantic import BaseModel, Field


class ArticleResponse(BaseModel):
    """Response payload for GET /api/articles/{filename}."""

    title: str = Field("", description="Front-matter title.")
    author: str = Field("", description="Front-matter author.")
    tags: list[str] = Field(default_factory=list, description="Front-matter tags, always a list.")
    content: str = Field("", description="Markdown body.")
    sha: str = Field(..., description="Version token required to overwrite or delete the file.")


class ArticleSummary(BaseModel):
    """One entry of GET /api/articles."""

    filename: str
    path: str
    sha: str
    size: int = 0


class SaveArticleResponse(BaseModel):
    success: bool = True
    sha: str | None = Field(default=None, description="Version token of the committed file.")


class SuccessResponse(BaseModel):
    success: bool = True
