from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from blog_editor.auth import require_user
from blog_editor.errors import InvalidInputError
from blog_editor.toc.toc import render_toc

toc_api = APIRouter(prefix="/api", dependencies=[Depends(require_user)])


@toc_api.post("/toc", response_class=HTMLResponse)
async def toc(request: Request) -> HTMLResponse:
    """Apply heading ids and the table of contents to a rendered page."""
    body = await request.body()
    if not body.strip():
        raise InvalidInputError("No HTML provided")

    return HTMLResponse(content=render_toc(body))
