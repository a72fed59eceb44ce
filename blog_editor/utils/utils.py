"""Utility helpers for the editor service.

Shared behaviors used across the API layer: application info, front-matter
shaping for articles, commit message wording, and logging setup.
"""

import logging
import re
import sys
import time
from typing import Any

import frontmatter

from blog_editor.settings import settings

_TAG_SEPARATORS = re.compile(r"[,\s]+")
_FRONT_MATTER = frontmatter.YAMLHandler()


def get_app_info() -> dict:
    """Return general information about the application.

    Used by the `/api/info` endpoint.

    Returns:
        dict: Application information (name, version, repository, environment).
    """
    return {"service_app_name": "blog-editor-service",
            "service_version": settings.EDITOR_SERVICE_VERSION,
            "repository": settings.REPOSITORY,
            "config": settings.EDITOR_ENV}


def normalise_tags(value: Any) -> list[str]:
    """Coerce a front-matter `tags` value into a list of strings.

    Jekyll accepts both a YAML list and a single string of space separated
    tags; editors in the wild also write comma separated ones.

    Args:
        value: Raw `tags` value from the front matter (list, str, None, ...).

    Returns:
        list[str]: Tags in source order, empties dropped.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(tag).strip() for tag in value if tag is not None and str(tag).strip()]
    if isinstance(value, str):
        return [tag for tag in _TAG_SEPARATORS.split(value) if tag]
    return [str(value)]


def split_front_matter(raw: str) -> tuple[dict[str, Any], str]:
    """Split a Markdown document into its front-matter mapping and body.

    The body is returned as written, minus the line break that ends the
    closing delimiter, so leading indentation and trailing newlines survive.
    """
    if not _FRONT_MATTER.detect(raw):
        return {}, raw
    try:
        fm, content = _FRONT_MATTER.split(raw)
    except ValueError:
        return {}, raw

    metadata = _FRONT_MATTER.load(fm)
    if content.startswith("\n"):
        content = content[1:]
    return dict(metadata) if isinstance(metadata, dict) else {}, content


def compose_article(title: str, author: str, tags: list[str], content: str,
                    extra: dict[str, Any] | None = None) -> str:
    """Serialize article fields back into a front-matter prefixed document.

    Args:
        title: Post title.
        author: Post author.
        tags: Tags, written as a YAML list.
        content: Markdown body.
        extra: Additional front-matter keys to keep (e.g. `layout`, `date`).

    Returns:
        str: The document text ending with a newline.
    """
    metadata: dict[str, Any] = dict(extra or {})
    metadata.update({"title": title, "author": author, "tags": list(tags)})
    post = frontmatter.Post(content, **metadata)
    return frontmatter.dumps(post, sort_keys=False) + "\n"


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def commit_message(action: str, subject: str, email: str | None) -> str:
    return f"{action} {subject} by {email}"


def setup_logging(component_name: str = "config_logger", log_level: int = 20) -> logging.Logger:
    """Configure a logger that writes to stdout with a consistent format.

    Args:
        component_name: Logger name to configure.
        log_level: Logging level to set on the logger and handler.

    Returns:
        logging.Logger: Configured logger instance.
    """
    root_logger = logging.getLogger(component_name)
    log_format = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(logging.Formatter(fmt=log_format))
    log_handler.setLevel(level=log_level)
    root_logger.setLevel(level=log_level)
    root_logger.propagate = False

    # only add the handler if a previous one does not exists
    handler_exists = False
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.level is log_handler.level:
            handler_exists = True
            break

    if not handler_exists:
        root_logger.addHandler(log_handler)

    return root_logger
