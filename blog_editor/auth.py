from collections.abc import Mapping

from fastapi import Depends, Request
from pydantic import BaseModel

from blog_editor.errors import UnauthorizedError
from blog_editor.settings import settings

SESSION_USER_KEY = "user"


class SessionUser(BaseModel):
    """Identity handed over by the identity provider at login."""

    name: str | None = None
    email: str | None = None

    def committer(self, default_name: str | None = None, default_email: str | None = None) -> dict[str, str]:
        return {
            "name": self.name or default_name or settings.EDITOR_DEFAULT_COMMITTER_NAME,
            "email": self.email or default_email or settings.EDITOR_DEFAULT_COMMITTER_EMAIL,
        }


def get_session_user(request: Request) -> SessionUser | None:
    # request.session asserts when SessionMiddleware is missing
    if "session" not in request.scope:
        return None

    user = request.session.get(SESSION_USER_KEY)
    if not isinstance(user, Mapping):
        return None

    return SessionUser(name=user.get("name"), email=user.get("email"))


def require_user(user: SessionUser | None = Depends(get_session_user)) -> SessionUser:
    if user is None:
        raise UnauthorizedError()
    return user
