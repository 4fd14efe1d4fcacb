"""Session data models.

A SessionRecord only ever lives in process memory (after resolve) or sealed
inside the cookie; it is never persisted server-side.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .conf import SESSION_COOKIE_NAME, SESSION_COOKIE_PATH


class SessionRecord(BaseModel):
    """Authenticated identity carried in the session cookie."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    username: str = Field(min_length=1)

    def __repr__(self) -> str:
        return f'<Session-Record username={self.username!r}>'


class CookieAttributes(BaseModel):
    """Cookie directive produced by SessionManager.issue."""

    model_config = ConfigDict(frozen=True)

    name: str = SESSION_COOKIE_NAME
    value: str
    path: str = SESSION_COOKIE_PATH
    httponly: bool = True
    secure: bool = False

    def __repr__(self) -> str:
        # the value is an opaque credential
        return (
            f'<Cookie name={self.name!r} path={self.path!r} '
            f'httponly={self.httponly} secure={self.secure}>'
        )

    def set_cookie_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``aiohttp.web.StreamResponse.set_cookie``."""
        kwargs: dict[str, Any] = {
            "path": self.path,
            "httponly": self.httponly,
        }
        if self.secure:
            kwargs["secure"] = True
        return kwargs
