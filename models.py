"""Calculator state and action models.

A CalculatorState is the single mutable record a reducer works on. It is
constructed by the caller and passed by reference into every action; there
is no process-wide calculator. An Action is one discrete input event
(a keypress or a button click) delivered by whatever UI drives the state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

MAX_LENGTH = 14
ERROR_DISPLAY = "Error"
INITIAL_DISPLAY = "0"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ActionKind(str, Enum):
    DIGIT = "digit"
    DECIMAL = "decimal"
    OPERATOR = "operator"
    EQUALS = "equals"
    CLEAR = "clear"
    BACKSPACE = "backspace"
    SIGN = "sign"
    PERCENT = "percent"


class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


DIGITS = frozenset("0123456789")

# Kinds that carry a payload; every other kind must not.
_PAYLOAD_KINDS = {ActionKind.DIGIT, ActionKind.OPERATOR}


# ---------------------------------------------------------------------------
# CalculatorState: the record the reducer mutates
# ---------------------------------------------------------------------------

@dataclass
class CalculatorState:
    """Display buffer, pending operation and repeated-equals memory."""

    current: str = INITIAL_DISPLAY
    previous: str | None = None
    operator: Operator | None = None
    waiting_for_next_value: bool = False
    last_operator: Operator | None = None
    last_operand: float | None = None

    @property
    def display(self) -> str:
        return self.current

    @property
    def is_error(self) -> bool:
        return self.current == ERROR_DISPLAY

    def snapshot(self) -> dict[str, Any]:
        return {
            "current": self.current,
            "previous": self.previous,
            "operator": self.operator.value if self.operator else None,
            "waiting_for_next_value": self.waiting_for_next_value,
            "last_operator": self.last_operator.value if self.last_operator else None,
            "last_operand": self.last_operand,
        }


# ---------------------------------------------------------------------------
# Action: one validated input event
# ---------------------------------------------------------------------------

class Action(BaseModel):
    """A single input event.

    `digit` carries one character 0-9 and `operator` carries one of
    `+ - * /`. The remaining kinds carry no value.
    """

    kind: ActionKind
    value: str | None = Field(default=None, max_length=1)

    @model_validator(mode="after")
    def value_matches_kind(self) -> Action:
        if self.kind == ActionKind.DIGIT:
            if self.value is None or self.value not in DIGITS:
                raise ValueError(f"digit action needs a value 0-9, got {self.value!r}")
        elif self.kind == ActionKind.OPERATOR:
            valid = {op.value for op in Operator}
            if self.value not in valid:
                raise ValueError(
                    f"operator action needs one of {sorted(valid)}, got {self.value!r}"
                )
        elif self.value is not None:
            raise ValueError(f"{self.kind.value} action takes no value")
        return self

    @classmethod
    def of(cls, kind: ActionKind | str, value: str | None = None) -> Action:
        return cls(kind=ActionKind(kind), value=value)

    def __str__(self) -> str:
        if self.kind in _PAYLOAD_KINDS:
            return f"{self.kind.value}({self.value})"
        return self.kind.value
