import re

from a2wsgi import ASGIMiddleware

from blog_editor.app import create_app

asgi_app = create_app()
asgi_middleware = ASGIMiddleware(asgi_app)  # type: ignore[arg-type]

# probes that never name a post or an asset; the handlers validate filenames themselves
_BAD_URI = re.compile(r"(%00|\${jndi:|/winnt/|/etc/passwd|/\.git/|wp-admin)", re.I)


def app(environ, start_response):
    try:
        path = environ.get("PATH_INFO", "")
        if _BAD_URI.search(path):
            start_response("400 Bad Request", [("Content-Type", "text/plain")])
            return [b"Bad Request: blocked"]

        # hand off to ASGI → WSGI bridge
        return asgi_middleware(environ, start_response)

    except UnicodeDecodeError:
        start_response("400 Bad Request", [("Content-Type", "text/plain")])
        return [b"Bad Request: malformed path"]
