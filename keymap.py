"""Input sources: keystrokes and button clicks mapped to actions.

A UI only has to turn its raw events into Actions and read the display
back; the reducer never sees keys or buttons. Events that do not map to
an action (modifier keys, clicks between buttons) are ignored.
"""
from __future__ import annotations

from typing import Iterable, Tuple, Union

from calculator import handle_action
from models import DIGITS, Action, ActionKind, CalculatorState, Operator

Event = Union[Action, Tuple[str, Union[str, None]]]

_OPERATOR_KEYS = {op.value for op in Operator}

_NAMED_KEYS: dict[str, ActionKind] = {
    ".": ActionKind.DECIMAL,
    "Enter": ActionKind.EQUALS,
    "=": ActionKind.EQUALS,
    "Escape": ActionKind.CLEAR,
    "Backspace": ActionKind.BACKSPACE,
    "%": ActionKind.PERCENT,
}


def action_for_key(key: str) -> Action | None:
    """Map a keyboard key name (as a browser reports it) to an action."""
    if key in DIGITS:
        return Action(kind=ActionKind.DIGIT, value=key)
    if key in _OPERATOR_KEYS:
        return Action(kind=ActionKind.OPERATOR, value=key)
    if key.lower() == "c":
        return Action(kind=ActionKind.CLEAR)
    kind = _NAMED_KEYS.get(key)
    return Action(kind=kind) if kind is not None else None


def action_for_click(action: str | None, value: str | None = None) -> Action | None:
    """Map a clicked control's action/value attributes to an action.

    Returns None when the click did not land on a control. Controls with
    an unknown action or a bad value raise, since that is a markup bug.
    """
    if action is None:
        return None
    return Action.of(action, value or None)


def replay(state: CalculatorState, events: Iterable[Event]) -> str:
    """Apply events in order and return the final display."""
    display = state.current
    for event in events:
        if isinstance(event, Action):
            display = handle_action(state, event)
        else:
            kind, value = event
            display = handle_action(state, kind, value)
    return display
