from blog_editor.settings import settings

bind = f"{settings.EDITOR_SERVICE_HOST}:{settings.EDITOR_SERVICE_PORT}"
workers = settings.EDITOR_WEB_SERVICE_WORKERS
wsgi_app = "wsgi:app"

# remote calls to GitHub are the slow part of every request
timeout = settings.GITHUB_API_TIMEOUT * 3
loglevel = "debug" if settings.DEBUG_MODE else "info"
accesslog = "-"
errorlog = "-"
