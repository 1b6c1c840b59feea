"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import router, set_store
from config import Settings, configure_logging
from store import SessionStore


def create_app(
    store: SessionStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store and settings for testing; otherwise settings
    are read from the environment and a fresh store is created.
    """
    if settings is None:
        settings = Settings.from_env()
    if store is None:
        store = SessionStore(max_sessions=settings.max_sessions)

    configure_logging(settings.log_level)
    set_store(store)

    app = FastAPI(
        title=settings.title,
        description=(
            "Keypad calculator sessions. Each session holds one calculator "
            "state; clients post actions or raw keystrokes and render the "
            "display string returned after every call."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
