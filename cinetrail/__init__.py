"""CineTrail browsing client; re-exports the ASGI app for ``uvicorn cinetrail:app``."""

from __future__ import annotations

from app.main import app, create_app

__all__ = ["app", "create_app"]
