"""
Application handlers: login, dashboard, submit, logout.

Thin aiohttp glue over SessionManager, the policy functions and a document
store. Responses are JSON; failures show only the generic policy message.
"""
import logging

import orjson
from aiohttp import web
from pydantic import ValidationError

from .exceptions import PolicyDenied
from .manager import SessionManager
from .middleware import get_session, session_middleware
from .policies import DenyReason, authorize_submit, owner_decrypt_if_allowed
from .storage import AbstractStore

logger = logging.getLogger("sealed_session.web")

MANAGER_KEY = web.AppKey("session_manager", SessionManager)
STORE_KEY = web.AppKey("session_store", AbstractStore)

_DENY_STATUS = {
    DenyReason.LOGIN_REQUIRED: 401,
    DenyReason.CONTENT_REJECTED: 422,
}


def _dumps(obj) -> str:
    return orjson.dumps(obj).decode("utf-8")


def _json(data: dict, status: int = 200) -> web.Response:
    return web.json_response(data, status=status, dumps=_dumps)


def _denied(err: PolicyDenied) -> web.Response:
    return _json(
        {"error": err.user_message},
        status=_DENY_STATUS.get(err.reason, 403),
    )


async def login(request: web.Request) -> web.StreamResponse:
    manager = request.app[MANAGER_KEY]
    store = request.app[STORE_KEY]
    form = await request.post()
    username = str(form.get("username", "")).strip()
    try:
        cookie = manager.issue(username)
    except ValidationError:
        return _json({"error": "A username is required."}, status=400)
    await store.setdefault(username, "")
    logger.info("User %s logged in", username)
    response = web.HTTPFound("/dashboard")
    response.set_cookie(cookie.name, cookie.value, **cookie.set_cookie_kwargs())
    raise response


async def logout(request: web.Request) -> web.StreamResponse:
    cookie = request.app[MANAGER_KEY].clear_cookie()
    response = web.HTTPFound("/")
    response.set_cookie(
        cookie.name, cookie.value, max_age=0, **cookie.set_cookie_kwargs()
    )
    raise response


async def dashboard(request: web.Request) -> web.StreamResponse:
    session = get_session(request)
    if session is None:
        raise web.HTTPFound("/")
    stored = await request.app[STORE_KEY].get(session.username)
    data = None
    if stored:
        try:
            data = owner_decrypt_if_allowed(
                request.app[MANAGER_KEY], session, stored, owner=session.username
            )
        except PolicyDenied as err:
            return _denied(err)
    return _json({"username": session.username, "data": data})


async def submit(request: web.Request) -> web.StreamResponse:
    session = get_session(request)
    form = await request.post()
    text = str(form.get("text", ""))
    target = session.username if session else None
    try:
        authorize_submit(session, target, text)
    except PolicyDenied as err:
        return _denied(err)
    sealed = request.app[MANAGER_KEY].encrypt_text_for(session, text)
    if sealed is None:
        raise web.HTTPInternalServerError(text="Unable to store data.")
    await request.app[STORE_KEY].set(session.username, sealed)
    raise web.HTTPFound("/dashboard")


def setup_notes(
    app: web.Application,
    manager: SessionManager,
    store: AbstractStore,
) -> web.Application:
    """Install the session middleware and routes on ``app``."""
    app[MANAGER_KEY] = manager
    app[STORE_KEY] = store
    app.middlewares.append(session_middleware(manager))
    app.router.add_post("/login", login)
    app.router.add_post("/logout", logout)
    app.router.add_get("/dashboard", dashboard)
    app.router.add_post("/submit", submit)
    return app
