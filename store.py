"""In-memory session store.

Each session owns one CalculatorState. All actions go through the store,
which checks the state rules after every transition and keeps timestamp
bookkeeping. Nothing survives a restart.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from calculator import clear_all, handle_action
from models import Action, ActionKind, CalculatorState
from rules import ValidationReport, validate_state

logger = logging.getLogger("calculator.store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionLimitError(Exception):
    """Raised when creating a session would exceed the configured limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Session limit reached: {limit}")


class StateInvariantError(Exception):
    """Raised when a state breaks a rule after an action."""

    def __init__(self, session_id: str, action: Action, report: ValidationReport) -> None:
        self.session_id = session_id
        self.action = action
        self.report = report
        super().__init__(report.summary())


@dataclass
class Session:
    id: str = field(default_factory=_new_id)
    state: CalculatorState = field(default_factory=CalculatorState)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def display(self) -> str:
        return self.state.current


class SessionStore:
    """In-memory store of calculator sessions."""

    def __init__(self, max_sessions: int = 1000) -> None:
        self.max_sessions = max_sessions
        self._sessions: dict[str, Session] = {}

    def create(self) -> Session:
        if len(self._sessions) >= self.max_sessions:
            raise SessionLimitError(self.max_sessions)
        now = _utcnow()
        session = Session(created_at=now, updated_at=now)
        self._sessions[session.id] = session
        logger.info("session %s created", session.id)
        return session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list(self, *, offset: int = 0, limit: int = 50) -> list[Session]:
        """Sessions, most recently created first."""
        items = sorted(
            self._sessions.values(), key=lambda s: s.created_at, reverse=True
        )
        return items[offset : offset + limit]

    def apply(self, session_id: str, action: Action) -> Session:
        """Apply one action to a session's state.

        Raises:
            SessionNotFoundError: unknown session id.
            StateInvariantError: the resulting state breaks a rule. The
                session is reset to a fresh state before raising.
        """
        session = self.get(session_id)
        handle_action(session.state, action)
        session.updated_at = _utcnow()

        report = validate_state(session.state)
        if not report.passed:
            logger.error(
                "session %s broke state rules after %s: %s",
                session_id, action, report.summary(),
            )
            clear_all(session.state)
            raise StateInvariantError(session_id, action, report)
        return session

    def clear(self, session_id: str) -> Session:
        return self.apply(session_id, Action(kind=ActionKind.CLEAR))

    def delete(self, session_id: str) -> Session:
        session = self.get(session_id)
        del self._sessions[session_id]
        logger.info("session %s deleted", session_id)
        return session

    def count(self) -> int:
        return len(self._sessions)

    def reset(self) -> None:
        """Remove all sessions (useful for testing)."""
        self._sessions.clear()
