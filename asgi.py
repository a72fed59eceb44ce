"""
This file is used to create a FastAPI application that will be served by a ASGI server
"""
import uvicorn

from blog_editor.app import create_app
from blog_editor.settings import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=settings.EDITOR_SERVICE_HOST, port=settings.EDITOR_SERVICE_PORT,
                log_level=settings.LOG_LEVEL, reload=False)
