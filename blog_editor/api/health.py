from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from blog_editor.dto.info_response import InfoResponse
from blog_editor.settings import settings
from blog_editor.utils.utils import get_app_info

health_api = APIRouter(prefix="/api")


@health_api.get("/health", response_class=ORJSONResponse)
def health() -> ORJSONResponse:
    return ORJSONResponse(content={"status": "healthy"})


@health_api.get("/ready", response_class=ORJSONResponse)
def ready() -> ORJSONResponse:
    """Report whether the repository the editor writes to is configured."""
    issues: list[str] = []
    if not settings.GITHUB_OWNER:
        issues.append("github_owner_missing")
    if not settings.GITHUB_REPO:
        issues.append("github_repo_missing")
    if not settings.GITHUB_TOKEN:
        issues.append("github_token_missing")

    if issues:
        return ORJSONResponse(status_code=503, content={"status": "not_ready", "issues": issues})

    return ORJSONResponse(content={"status": "ready", "repository": settings.REPOSITORY})


@health_api.get("/info", response_model=InfoResponse, response_class=ORJSONResponse)
def info() -> ORJSONResponse:
    return ORJSONResponse(content=get_app_info())
