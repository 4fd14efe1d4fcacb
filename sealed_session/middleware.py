"""aiohttp middleware resolving the session cookie on every request."""
import logging
from collections.abc import Awaitable, Callable
from typing import Optional

from aiohttp import web

from .conf import SESSION_KEY
from .data import SessionRecord
from .manager import SessionManager

logger = logging.getLogger("sealed_session.web")

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def session_middleware(manager: SessionManager):
    """Build a middleware storing the resolved session in ``request["session"]``.

    A missing, malformed or forged cookie all resolve to None.
    """
    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        outcome = manager.inspect(request.cookies.get(manager.cookie_name))
        if not outcome.ok:
            logger.debug(
                "Anonymous request %s %s (%s)",
                request.method, request.path, outcome.status.value,
            )
        request[SESSION_KEY] = outcome.value
        return await handler(request)

    return middleware


def get_session(request: web.Request) -> Optional[SessionRecord]:
    """Return the SessionRecord resolved for this request, if any."""
    return request.get(SESSION_KEY)
