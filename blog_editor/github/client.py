"""Thin client for the GitHub repository contents API.

Only the calls the editor needs: read a path, list a directory, create or
update a file and delete a file. One client is opened per request.
"""

from __future__ import annotations

import base64
from typing import Any
from urllib.parse import quote

import requests

from blog_editor.errors import ConfigurationError, NotFoundError, RemoteRepositoryError
from blog_editor.settings import Settings, settings
from blog_editor.utils.utils import setup_logging

GITHUB_MEDIA_TYPE = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"


class RepositoryClient:

    def __init__(self, owner: str, repo: str, token: str | None = None,
                 api_url: str = "https://api.github.com", branch: str | None = None,
                 timeout: int = 20) -> None:
        self.log = setup_logging(component_name="editor.github", log_level=settings.LOG_LEVEL)
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.timeout = timeout
        self.base_url = f"{api_url.rstrip('/')}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

        self.session = requests.Session()
        self.session.headers.update({
            "Accept": GITHUB_MEDIA_TYPE,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": "blog-editor-service",
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_settings(cls, config: Settings | None = None,
                      missing_message: str = "Config missing") -> RepositoryClient:
        """Build a client from the service settings.

        Raises:
            ConfigurationError: owner or repository name is not configured.
        """
        config = config or settings
        if not config.GITHUB_OWNER or not config.GITHUB_REPO:
            raise ConfigurationError(missing_message)

        return cls(owner=config.GITHUB_OWNER,
                   repo=config.GITHUB_REPO,
                   token=config.GITHUB_TOKEN,
                   api_url=config.GITHUB_API_URL,
                   branch=config.GITHUB_BRANCH,
                   timeout=config.GITHUB_API_TIMEOUT)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> RepositoryClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _contents_url(self, path: str) -> str:
        return f"{self.base_url}/contents/{quote(path.strip('/'), safe='/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self._contents_url(path)
        self.log.debug("%s %s", method, url)
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)

        if response.status_code == 404:
            if method == "GET":
                raise NotFoundError("File not found or is a directory")
            raise NotFoundError(f"Not found: {path}")

        if not response.ok:
            message = _error_message(response)
            self.log.error("GitHub %s %s failed: %s %s", method, path, response.status_code, message)
            raise RemoteRepositoryError(message, response.status_code)

        if not response.content:
            return {}
        return response.json()

    def get_content(self, path: str) -> dict[str, Any] | list[dict[str, Any]]:
        """Fetch a file (dict) or a directory listing (list) at `path`."""
        params = {"ref": self.branch} if self.branch else None
        return self._request("GET", path, params=params)

    def list_directory(self, path: str) -> list[dict[str, Any]]:
        data = self.get_content(path)
        if not isinstance(data, list):
            return []
        return data

    def put_content(self, path: str, message: str, content: str, committer: dict[str, str],
                    sha: str | None = None) -> dict[str, Any]:
        """Create or update a file.

        Args:
            path: Repository path of the file.
            message: Commit message.
            content: Base64 encoded file content.
            committer: `{"name", "email"}` used for the commit.
            sha: Version token of the file being replaced, None when creating.
        """
        payload: dict[str, Any] = {"message": message, "content": content, "committer": committer}
        if sha:
            payload["sha"] = sha
        if self.branch:
            payload["branch"] = self.branch
        return self._request("PUT", path, json=payload)

    def delete_content(self, path: str, message: str, sha: str, committer: dict[str, str]) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": message, "sha": sha, "committer": committer}
        if self.branch:
            payload["branch"] = self.branch
        return self._request("DELETE", path, json=payload)


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"GitHub API responded with status {response.status_code}"


def decode_content(entry: dict[str, Any]) -> str:
    """Decode the base64 `content` field of a contents API file entry."""
    return base64.b64decode(entry.get("content") or "").decode("utf-8")


def encode_content(data: bytes | str) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("ascii")


def is_file_entry(data: Any) -> bool:
    return isinstance(data, dict) and "content" in data and data.get("type", "file") == "file"

