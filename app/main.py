"""Entry point for the FastAPI-powered browsing client."""

from __future__ import annotations

import json
import logging
import secrets
import time
from collections import OrderedDict
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, Callable

import httpx
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import ValidationError

from .config import Settings, settings
from .intents import parse_intent
from .services.catalog import CatalogClient, CatalogSource
from .session import BrowserSession
from .web import render_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SESSION_COOKIE = "cinetrail_session"

app: FastAPI


class SessionStore:
    """In-memory browser sessions keyed by cookie value.

    Sessions idle for longer than ``session_idle_seconds`` are dropped, and
    once ``max_sessions`` are held the least recently used one is evicted
    to make room for a new session.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        app_settings: Settings,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._catalog = catalog
        self._settings = app_settings
        self._clock = clock
        self._sessions: OrderedDict[str, tuple[BrowserSession, float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str | None) -> BrowserSession | None:
        if not session_id:
            return None
        self._expire()
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        session, _ = entry
        self._sessions[session_id] = (session, self._clock())
        self._sessions.move_to_end(session_id)
        return session

    def create(self) -> tuple[str, BrowserSession]:
        self._expire()
        while len(self._sessions) >= self._settings.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted browsing session %s", evicted[:6])
        session_id = secrets.token_urlsafe(16)
        session = BrowserSession(self._catalog, self._settings)
        self._sessions[session_id] = (session, self._clock())
        logger.info("Started browsing session %s", session_id[:6])
        return session_id, session

    def _expire(self) -> None:
        cutoff = self._clock() - self._settings.session_idle_seconds
        # Entries are kept in last-seen order, oldest first.
        while self._sessions:
            session_id, (_, last_seen) = next(iter(self._sessions.items()))
            if last_seen > cutoff:
                break
            del self._sessions[session_id]
            logger.info("Expired idle browsing session %s", session_id[:6])


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    catalog_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=settings.catalog_base_url,
            timeout=httpx.Timeout(settings.request_timeout, connect=5.0),
        )
    )
    fastapi_app.state.sessions = SessionStore(
        CatalogClient(catalog_http_client), settings
    )
    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Browse movie series, their entries and trailers",
        version="1.0.0",
        lifespan=lifespan,
    )
    register_routes(fastapi_app)
    return fastapi_app


def get_session_store(fastapi_app: FastAPI) -> SessionStore:
    store = getattr(fastapi_app.state, "sessions", None)
    if not isinstance(store, SessionStore):
        raise RuntimeError("Session store not initialised")
    return store


def register_routes(fastapi_app: FastAPI) -> None:
    def _resolve_session(request: Request) -> tuple[str, BrowserSession, bool]:
        store = get_session_store(fastapi_app)
        session_id = request.cookies.get(SESSION_COOKIE)
        session = store.get(session_id)
        if session is not None and session_id is not None:
            return session_id, session, False
        session_id, session = store.create()
        return session_id, session, True

    def _remember(response: Response, session_id: str, created: bool) -> None:
        if created:
            response.set_cookie(
                SESSION_COOKIE, session_id, httponly=True, samesite="lax"
            )

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        session_id, session, created = _resolve_session(request)
        response = HTMLResponse(render_page(session.settings, session.snapshot()))
        _remember(response, session_id, created)
        return response

    @fastapi_app.get("/api/state")
    async def state_endpoint(request: Request) -> JSONResponse:
        session_id, session, created = _resolve_session(request)
        response = JSONResponse(session.snapshot())
        _remember(response, session_id, created)
        return response

    @fastapi_app.post("/api/intents")
    async def intent_endpoint(request: Request) -> JSONResponse:
        try:
            payload: Any = await request.json()
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")
        try:
            intent = parse_intent(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=json.loads(exc.json())
            ) from exc

        session_id, session, created = _resolve_session(request)
        await session.dispatch(intent)
        response = JSONResponse(session.snapshot())
        _remember(response, session_id, created)
        return response


app = create_app()
