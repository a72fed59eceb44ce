from __future__ import annotations

from pydantic import BaseModel, Field

from blog_editor.github.client import encode_content
from blog_editor.utils.validation import sanitize_upload_name


class UploadContext(BaseModel):
    """Holds a single image upload between validation and the commit.

    Nothing here is persisted: the context is built from the multipart
    request, turned into one contents API call and dropped.
    """

    stream: bytes
    """Raw image bytes read from the multipart body."""

    file_name: str
    """Filename as declared by the client."""

    media_type: str | None = None
    """Declared content type of the part."""

    timestamp: int
    """Capture time in milliseconds, prefixed to the stored filename."""

    assets_dir: str = Field("assets/images")
    """Repository directory the image is committed under."""

    @property
    def size(self) -> int:
        return len(self.stream)

    @property
    def stored_name(self) -> str:
        return f"{self.timestamp}-{sanitize_upload_name(self.file_name)}"

    @property
    def repository_path(self) -> str:
        return f"{self.assets_dir}/{self.stored_name}"

    @property
    def public_url(self) -> str:
        """Site-relative URL the rendered post links to."""
        return f"/{self.repository_path}"

    def encoded(self) -> str:
        return encode_content(self.stream)
