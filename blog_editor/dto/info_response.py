from pydantic import BaseModel, Field


class InfoResponse(BaseModel):
    """Response payload for the /api/info endpoint."""

    service_app_name: str = Field(..., description="Service name.")
    service_version: str = Field(..., description="Service version string.")
    repository: str = Field(..., description="Configured owner/repo, empty when unset.")
    config: str = Field(..., description="Environment name.")
