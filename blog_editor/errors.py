"""Error taxonomy for the editor API.

Every failure the handlers report on purpose is an ``EditorError`` carrying
the HTTP status it maps to. The application installs a single exception
handler that renders them as ``{"error": message}``. Anything else that goes
wrong while talking to the remote repository is logged and answered with a
redacted 500 (see ``safe_error_message``).
"""

from fastapi import Request
from fastapi.responses import ORJSONResponse

from blog_editor.settings import settings

INTERNAL_ERROR_MESSAGE = "An internal error occurred"


class EditorError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnauthorizedError(EditorError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidInputError(EditorError):
    status_code = 400


class NotFoundError(EditorError):
    status_code = 404


class ConfigurationError(EditorError):
    status_code = 500


class RemoteRepositoryError(Exception):
    """Raised when the GitHub API answers with a non-success status."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


def safe_error_message(error: BaseException, production: bool | None = None) -> str:
    """Message for an unexpected failure, redacted in production."""
    if production is None:
        production = settings.IS_PRODUCTION
    if production:
        return INTERNAL_ERROR_MESSAGE
    return str(error) or "Unknown error"


def error_response(message: str, status_code: int) -> ORJSONResponse:
    return ORJSONResponse(content={"error": message}, status_code=status_code)


async def editor_error_handler(request: Request, exc: EditorError) -> ORJSONResponse:
    return error_response(exc.message, exc.status_code)
