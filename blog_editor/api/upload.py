from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as StarletteUploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from blog_editor.auth import SessionUser, require_user
from blog_editor.dto.upload_context import UploadContext
from blog_editor.dto.upload_response import UploadResponse
from blog_editor.errors import EditorError, InvalidInputError, error_response, safe_error_message
from blog_editor.github.client import RepositoryClient
from blog_editor.settings import settings
from blog_editor.utils.utils import commit_message, current_timestamp_ms, setup_logging
from blog_editor.utils.validation import validate_upload

log = setup_logging(component_name="editor.upload", log_level=settings.LOG_LEVEL)

upload_api = APIRouter(prefix="/api")


def commit_upload(context: UploadContext, user: SessionUser) -> None:
    client = RepositoryClient.from_settings(missing_message="GitHub configuration missing")
    try:
        client.put_content(context.repository_path,
                           message=commit_message("Upload image:", context.stored_name, user.email),
                           content=context.encoded(),
                           committer=user.committer())
    finally:
        client.close()


@upload_api.post("/upload", response_model=UploadResponse, response_class=ORJSONResponse)
async def upload(request: Request, user: SessionUser = Depends(require_user)) -> ORJSONResponse:
    """Commit one image into the assets directory of the repository.

    The multipart body is parsed only after the session check, so anonymous
    callers get 401 whatever they send.
    """

    try:
        async with request.form() as form:
            file = form.get("file")
            if not isinstance(file, StarletteUploadFile):
                raise InvalidInputError("No file provided")

            # one byte past the ceiling is enough to reject, no need to buffer the rest
            stream = await file.read(settings.EDITOR_MAX_UPLOAD_SIZE + 1)
            file_name, media_type = file.filename or "", file.content_type
    except (HTTPException, MultiPartException) as exc:
        raise InvalidInputError("Invalid multipart data") from exc

    validate_upload(media_type=media_type,
                    size=len(stream),
                    max_size=settings.EDITOR_MAX_UPLOAD_SIZE,
                    allowed_types=settings.ALLOWED_IMAGE_TYPES)

    context = UploadContext(stream=stream,
                            file_name=file_name,
                            media_type=media_type,
                            timestamp=current_timestamp_ms(),
                            assets_dir=settings.EDITOR_ASSETS_DIR)

    try:
        await run_in_threadpool(commit_upload, context, user)
    except EditorError:
        raise
    except Exception as exc:
        log.error("upload of %s failed: %s", context.stored_name, exc, exc_info=exc)
        return error_response(safe_error_message(exc), 500)

    log.info("uploaded %s (%s bytes) by %s", context.repository_path, context.size, user.email)
    return ORJSONResponse(content=UploadResponse(url=context.public_url).model_dump())
