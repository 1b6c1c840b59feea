"""FastAPI endpoints for driving calculator sessions.

Routes
------
POST   /sessions                 Create a session
GET    /sessions                 List sessions
GET    /sessions/{id}            Read a session's display and state
POST   /sessions/{id}/actions    Apply one action
POST   /sessions/{id}/keys       Apply one keystroke (unmapped keys are ignored)
POST   /sessions/{id}/clear      Reset a session
DELETE /sessions/{id}            Delete a session
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from keymap import action_for_key
from models import Action
from store import (
    Session,
    SessionLimitError,
    SessionNotFoundError,
    SessionStore,
    StateInvariantError,
)

logger = logging.getLogger("calculator.api")

router = APIRouter(prefix="/sessions", tags=["sessions"])

# The store instance is injected by the app factory (see app.py).
_store: SessionStore | None = None


def set_store(store: SessionStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> SessionStore:
    assert _store is not None, "Store not initialized"
    return _store


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class KeyPress(BaseModel):
    key: str = Field(..., min_length=1, max_length=32)


class SessionView(BaseModel):
    id: str
    display: str
    state: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> SessionView:
        return cls(
            id=session.id,
            display=session.display,
            state=session.state.snapshot(),
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class SessionListResponse(BaseModel):
    items: list[SessionView]
    total: int


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Session not found: {session_id}")


def _invariant_error(e: StateInvariantError) -> HTTPException:
    return HTTPException(status_code=500, detail=str(e))


def _apply(session_id: str, action: Action) -> SessionView:
    store = get_store()
    try:
        return SessionView.from_session(store.apply(session_id, action))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except StateInvariantError as e:
        raise _invariant_error(e) from e


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=SessionView, status_code=201)
def create_session() -> SessionView:
    """Create a session with a fresh calculator state."""
    store = get_store()
    try:
        return SessionView.from_session(store.create())
    except SessionLimitError as e:
        raise HTTPException(status_code=429, detail=str(e)) from e


@router.get("", response_model=SessionListResponse)
def list_sessions(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> SessionListResponse:
    store = get_store()
    items = [SessionView.from_session(s) for s in store.list(offset=offset, limit=limit)]
    return SessionListResponse(items=items, total=store.count())


@router.get("/{session_id}", response_model=SessionView)
def get_session(session_id: str) -> SessionView:
    store = get_store()
    try:
        return SessionView.from_session(store.get(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)


@router.post("/{session_id}/actions", response_model=SessionView)
def apply_action(session_id: str, action: Action) -> SessionView:
    """Apply one action and return the new display."""
    return _apply(session_id, action)


@router.post("/{session_id}/keys", response_model=SessionView)
def press_key(session_id: str, press: KeyPress) -> SessionView:
    """Apply the action a keystroke maps to, if any."""
    action = action_for_key(press.key)
    if action is None:
        logger.debug("session %s: ignored key %r", session_id, press.key)
        return get_session(session_id)
    return _apply(session_id, action)


@router.post("/{session_id}/clear", response_model=SessionView)
def clear_session(session_id: str) -> SessionView:
    store = get_store()
    try:
        return SessionView.from_session(store.clear(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)
    except StateInvariantError as e:
        raise _invariant_error(e) from e


@router.delete("/{session_id}", response_model=SessionView)
def delete_session(session_id: str) -> SessionView:
    """Delete a session and return its final view."""
    store = get_store()
    try:
        return SessionView.from_session(store.delete(session_id))
    except SessionNotFoundError:
        raise _not_found(session_id)
