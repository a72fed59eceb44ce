from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response payload for POST /api/upload."""

    url: str = Field(..., description="Site-relative path of the committed image.")
