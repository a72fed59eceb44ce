from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from starlette.middleware.sessions import SessionMiddleware

from blog_editor.api.api import api
from blog_editor.errors import ConfigurationError, EditorError, editor_error_handler
from blog_editor.settings import settings
from blog_editor.utils.utils import setup_logging


def create_app() -> FastAPI:
    """
        :description: Creates FastAPI application with the API router, session middleware and error handler
        :return: FastAPI application instance
    """

    log = setup_logging(component_name="editor.app", log_level=settings.LOG_LEVEL)

    if settings.IS_PRODUCTION and not settings.HAS_SESSION_SECRET:
        raise ConfigurationError("EDITOR_SESSION_SECRET must be set in production")

    app = FastAPI(title="Blog Editor Service",
                  description="Edits Markdown posts and image assets stored in a GitHub repository",
                  version=settings.EDITOR_SERVICE_VERSION,
                  default_response_class=ORJSONResponse,
                  debug=settings.DEBUG_MODE)

    app.add_middleware(SessionMiddleware,
                       secret_key=settings.EDITOR_SESSION_SECRET,
                       session_cookie=settings.EDITOR_SESSION_COOKIE,
                       same_site="lax",
                       https_only=settings.IS_PRODUCTION)
    app.add_exception_handler(EditorError, editor_error_handler)  # type: ignore[arg-type]
    app.include_router(api)

    if not settings.REPOSITORY:
        log.warning("GITHUB_OWNER/GITHUB_REPO not set, repository endpoints will answer 500")
    log.info("editor service %s started (%s)", settings.EDITOR_SERVICE_VERSION, settings.EDITOR_ENV)

    return app
