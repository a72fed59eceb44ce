"""Input checks applied before any identifier reaches the GitHub API."""

import re
from urllib.parse import unquote

from blog_editor.errors import InvalidInputError

ARTICLE_EXTENSION = ".md"

# ASCII word characters, CJK punctuation, hiragana, katakana, CJK ideographs, hyphen, dot
_FILENAME_PATTERN = re.compile(
    r"^[A-Za-z0-9_\u3000-\u303f\u3040-\u309f\u30a0-\u30ff\u4e00-\u9faf\-.]+$"
)
_UPLOAD_NAME_STRIP = re.compile(r"[^a-zA-Z0-9.-]")

IMAGE_TYPE_LABELS: dict[str, str] = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WebP",
    "image/svg+xml": "SVG",
}


def is_valid_filename(filename: str) -> bool:
    if ".." in filename or "/" in filename or "\\" in filename:
        return False
    if not filename.endswith(ARTICLE_EXTENSION):
        return False
    return _FILENAME_PATTERN.match(filename) is not None


def validate_filename(raw_filename: str) -> str:
    """Decode a filename path segment and reject anything unsafe.

    Raises:
        InvalidInputError: the decoded name is not a plain Markdown filename.
    """
    filename = unquote(raw_filename)
    if not is_valid_filename(filename):
        raise InvalidInputError("Invalid filename")
    return filename


def sanitize_upload_name(name: str) -> str:
    return _UPLOAD_NAME_STRIP.sub("", name)


def format_size(num_bytes: int) -> str:
    mib = num_bytes / (1024 * 1024)
    if mib.is_integer():
        return f"{int(mib)}MB"
    return f"{mib:.1f}MB"


def validate_upload(media_type: str | None, size: int, max_size: int, allowed_types: tuple[str, ...]) -> None:
    """Check the declared media type and byte length of an upload.

    Raises:
        InvalidInputError: type outside the allow-list or size above the ceiling.
    """
    if media_type not in allowed_types:
        allowed = ", ".join(IMAGE_TYPE_LABELS.get(t, t) for t in allowed_types)
        raise InvalidInputError(f"Invalid file type. Allowed: {allowed}")

    if size > max_size:
        raise InvalidInputError(f"File too large. Maximum size: {format_size(max_size)}")
