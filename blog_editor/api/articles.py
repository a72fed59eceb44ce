from typing import Any

import orjson
from fastapi import APIRouter, Depends, Request
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from blog_editor.auth import SessionUser, require_user
from blog_editor.dto.article_request import DeleteArticleRequest, SaveArticleRequest
from blog_editor.dto.article_response import ArticleResponse, ArticleSummary, SaveArticleResponse, SuccessResponse
from blog_editor.errors import EditorError, InvalidInputError, NotFoundError, error_response, safe_error_message
from blog_editor.github.client import RepositoryClient, decode_content, encode_content, is_file_entry
from blog_editor.settings import settings
from blog_editor.utils.utils import commit_message, compose_article, normalise_tags, setup_logging, split_front_matter
from blog_editor.utils.validation import ARTICLE_EXTENSION, validate_filename

log = setup_logging(component_name="editor.articles", log_level=settings.LOG_LEVEL)

articles_api = APIRouter(prefix="/api/articles", dependencies=[Depends(require_user)])

EDITED_FIELDS = ("title", "author", "tags")


def post_path(filename: str) -> str:
    return f"{settings.EDITOR_POSTS_DIR}/{filename}"


def _text(value: Any) -> str:
    return str(value) if value else ""


def read_article(client: RepositoryClient, filename: str) -> ArticleResponse:
    data = client.get_content(post_path(filename))

    if not is_file_entry(data):
        raise NotFoundError("File not found or is a directory")

    metadata, body = split_front_matter(decode_content(data))  # type: ignore[arg-type]

    return ArticleResponse(title=_text(metadata.get("title")),
                           author=_text(metadata.get("author")),
                           tags=normalise_tags(metadata.get("tags")),
                           content=body,
                           sha=data["sha"])  # type: ignore[index]


def list_articles(client: RepositoryClient) -> list[ArticleSummary]:
    articles = []
    for entry in client.list_directory(settings.EDITOR_POSTS_DIR):
        name = entry.get("name", "")
        if entry.get("type") != "file" or not name.endswith(ARTICLE_EXTENSION):
            continue
        articles.append(ArticleSummary(filename=name,
                                       path=entry.get("path", post_path(name)),
                                       sha=entry.get("sha", ""),
                                       size=entry.get("size", 0)))
    return articles


def stored_front_matter(client: RepositoryClient, filename: str) -> dict[str, Any]:
    """Front-matter keys of the stored post that the editor does not manage (layout, date, ...)."""
    data = client.get_content(post_path(filename))
    if not is_file_entry(data):
        return {}
    metadata, _ = split_front_matter(decode_content(data))  # type: ignore[arg-type]
    return {key: value for key, value in metadata.items() if key not in EDITED_FIELDS}


def save_article(client: RepositoryClient, filename: str, request: SaveArticleRequest,
                 user: SessionUser) -> SaveArticleResponse:
    extra = stored_front_matter(client, filename) if request.sha else None
    document = compose_article(request.title, request.author, request.tags, request.content, extra=extra)
    action = "Update article" if request.sha else "Create article"

    result = client.put_content(post_path(filename),
                                message=commit_message(action, filename, user.email),
                                content=encode_content(document),
                                committer=user.committer(),
                                sha=request.sha)

    return SaveArticleResponse(sha=(result.get("content") or {}).get("sha"))


def delete_article(client: RepositoryClient, filename: str, sha: str, user: SessionUser) -> None:
    client.delete_content(post_path(filename),
                          message=commit_message("Delete article", filename, user.email),
                          sha=sha,
                          committer=user.committer())


async def _read_json(request: Request) -> dict[str, Any]:
    body = await request.body()
    if not body:
        return {}
    try:
        payload = orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise InvalidInputError("Invalid JSON body") from exc
    if not isinstance(payload, dict):
        raise InvalidInputError("Invalid JSON body")
    return payload


def _internal_error(exc: Exception) -> ORJSONResponse:
    log.error("article request failed: %s", exc, exc_info=exc)
    return error_response(safe_error_message(exc), 500)


async def _call_remote(func, *args) -> Any:
    """Run one blocking repository workflow off the event loop, closing the client afterwards."""
    client = RepositoryClient.from_settings()
    try:
        return await run_in_threadpool(func, client, *args)
    finally:
        client.close()


@articles_api.get("", response_model=list[ArticleSummary], response_class=ORJSONResponse)
async def get_articles() -> ORJSONResponse:
    try:
        articles = await _call_remote(list_articles)
    except EditorError:
        raise
    except Exception as exc:
        return _internal_error(exc)

    return ORJSONResponse(content=[article.model_dump() for article in articles])


@articles_api.get("/{filename:path}", response_model=ArticleResponse, response_class=ORJSONResponse)
async def get_article(filename: str) -> ORJSONResponse:
    filename = validate_filename(filename)

    try:
        article = await _call_remote(read_article, filename)
    except EditorError:
        raise
    except Exception as exc:
        return _internal_error(exc)

    return ORJSONResponse(content=article.model_dump())


@articles_api.put("/{filename:path}", response_model=SaveArticleResponse, response_class=ORJSONResponse)
async def put_article(filename: str, request: Request, user: SessionUser = Depends(require_user)) -> ORJSONResponse:
    filename = validate_filename(filename)

    try:
        payload = SaveArticleRequest.model_validate(await _read_json(request))
    except ValidationError as exc:
        raise InvalidInputError("Invalid article payload") from exc

    try:
        result = await _call_remote(save_article, filename, payload, user)
    except EditorError:
        raise
    except Exception as exc:
        return _internal_error(exc)

    log.info("saved article %s by %s", filename, user.email)
    return ORJSONResponse(content=result.model_dump())


@articles_api.delete("/{filename:path}", response_model=SuccessResponse, response_class=ORJSONResponse)
async def remove_article(filename: str, request: Request, user: SessionUser = Depends(require_user)) -> ORJSONResponse:
    filename = validate_filename(filename)

    try:
        payload = DeleteArticleRequest.model_validate(await _read_json(request))
    except ValidationError as exc:
        raise InvalidInputError("Invalid delete payload") from exc

    if not payload.sha:
        raise InvalidInputError("Missing sha")

    try:
        await _call_remote(delete_article, filename, payload.sha, user)
    except EditorError:
        raise
    except Exception as exc:
        return _internal_error(exc)

    log.info("deleted article %s by %s", filename, user.email)
    return ORJSONResponse(content=SuccessResponse().model_dump())
