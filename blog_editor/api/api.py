from fastapi import APIRouter

from blog_editor.api.articles import articles_api
from blog_editor.api.health import health_api
from blog_editor.api.toc import toc_api
from blog_editor.api.upload import upload_api

api = APIRouter()

api.include_router(health_api)
api.include_router(articles_api)
api.include_router(upload_api)
api.include_router(toc_api)
