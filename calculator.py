"""Keypad calculator reducer.

Every public transition takes a caller-owned CalculatorState, mutates it in
place and never raises for arithmetic problems: a non-finite result is
shown as the "Error" sentinel, and the next edit action starts over from a
cleared state.

Entry point
-----------
handle_action(state, action, value)  validate, dispatch, return the display
"""
from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal

from models import (
    ERROR_DISPLAY,
    INITIAL_DISPLAY,
    MAX_LENGTH,
    Action,
    ActionKind,
    CalculatorState,
    Operator,
)

logger = logging.getLogger("calculator.reducer")

SIGNIFICANT_DIGITS = 12

# Ties round away from zero, on the exact binary value.
_ROUNDING = Context(prec=SIGNIFICANT_DIGITS, rounding=ROUND_HALF_UP)

# Decimal exponents outside this window switch to exponent notation.
_PLAIN_MIN_EXPONENT = -6
_PLAIN_MAX_EXPONENT = 21


class InvalidActionError(ValueError):
    """Raised when an action kind or its payload is not recognised."""

    def __init__(self, action: object, value: object, reason: str) -> None:
        self.action = action
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid action {action!r} (value={value!r}): {reason}")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def clamp_length(value: str) -> str:
    return value[:MAX_LENGTH]


def normalize_zero(value: str) -> str:
    return INITIAL_DISPLAY if value == "-0" else value


def to_number(value: str | None) -> float:
    """Parse a display string; anything unparsable becomes NaN."""
    if value is None:
        return math.nan
    try:
        return float(value)
    except ValueError:
        return math.nan


def _minimal_decimal(value: float) -> str:
    """Shortest decimal rendering of a float, without trailing zeros.

    Plain notation is used while the decimal point sits within
    (-6, 21] digits of the first significant digit, e.g. ``0.000001``
    and ``100000000000000000000``; beyond that ``1e-7`` / ``1e+21``.
    """
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    k = len(digits)
    n = k + parts.exponent  # position of the decimal point

    if k <= n <= _PLAIN_MAX_EXPONENT:
        body = digits + "0" * (n - k)
    elif 0 < n <= _PLAIN_MAX_EXPONENT:
        body = f"{digits[:n]}.{digits[n:]}"
    elif _PLAIN_MIN_EXPONENT < n <= 0:
        body = "0." + "0" * -n + digits
    else:
        exponent = n - 1
        mantissa = digits[0] + (f".{digits[1:]}" if k > 1 else "")
        body = f"{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
    return sign + body


def fit_width(text: str) -> str:
    """Truncate to the display width, keeping any exponent suffix whole."""
    if len(text) <= MAX_LENGTH or "e" not in text:
        return clamp_length(text)
    mantissa, _, exponent = text.partition("e")
    room = MAX_LENGTH - len(exponent) - 1
    return f"{mantissa[:room].rstrip('.')}e{exponent}"


def format_result(value: float) -> str:
    """Render an arithmetic result for the display.

    Non-finite values map to the error sentinel. Finite values are rounded
    to 12 significant digits to absorb binary noise (0.1 + 0.2 shows
    ``0.3``), then truncated, not re-rounded, to the display width.
    """
    if not math.isfinite(value):
        logger.debug("non-finite result %r shown as %s", value, ERROR_DISPLAY)
        return ERROR_DISPLAY

    rounded = float(_ROUNDING.plus(Decimal(value)))
    return fit_width(normalize_zero(_minimal_decimal(rounded)))


def apply_operator(operator: Operator | str | None, left: float, right: float) -> float:
    """Apply a binary operator. Division by zero yields NaN, not an exception."""
    if operator == Operator.ADD:
        return left + right
    if operator == Operator.SUBTRACT:
        return left - right
    if operator == Operator.MULTIPLY:
        return left * right
    if operator == Operator.DIVIDE:
        return math.nan if right == 0 else left / right
    return right


# ---------------------------------------------------------------------------
# State transitions
# ---------------------------------------------------------------------------

def clear_all(state: CalculatorState) -> None:
    state.current = INITIAL_DISPLAY
    state.previous = None
    state.operator = None
    state.waiting_for_next_value = False
    state.last_operator = None
    state.last_operand = None


def clear_error_if_needed(state: CalculatorState) -> None:
    if state.is_error:
        clear_all(state)


def input_digit(state: CalculatorState, digit: str) -> None:
    clear_error_if_needed(state)

    if state.waiting_for_next_value:
        state.current = digit
        state.waiting_for_next_value = False
        return

    if state.current == INITIAL_DISPLAY:
        state.current = digit
        return

    state.current = clamp_length(state.current + digit)


def input_decimal(state: CalculatorState) -> None:
    clear_error_if_needed(state)

    if state.waiting_for_next_value:
        state.current = "0."
        state.waiting_for_next_value = False
        return

    if "." not in state.current and "e" not in state.current:
        state.current = clamp_length(state.current + ".")


def backspace(state: CalculatorState) -> None:
    clear_error_if_needed(state)

    if state.waiting_for_next_value:
        return

    current = state.current
    if len(current) == 1 or (len(current) == 2 and current.startswith("-")):
        state.current = INITIAL_DISPLAY
        return

    trimmed = current[:-1]
    if trimmed.endswith(("e+", "e-")):
        trimmed = trimmed[:-2]
    state.current = trimmed


def toggle_sign(state: CalculatorState) -> None:
    clear_error_if_needed(state)

    if state.current == INITIAL_DISPLAY:
        return

    if state.current.startswith("-"):
        state.current = state.current[1:]
    else:
        state.current = fit_width("-" + state.current)


def percentage(state: CalculatorState) -> None:
    clear_error_if_needed(state)
    state.current = format_result(to_number(state.current) / 100)


def set_operator(state: CalculatorState, operator: Operator | str) -> None:
    """Set the pending operator, folding in any pending pair first.

    Pressing a second operator straight after the first only replaces it.
    """
    clear_error_if_needed(state)
    next_operator = Operator(operator)

    if state.operator is not None and not state.waiting_for_next_value:
        result = apply_operator(
            state.operator, to_number(state.previous), to_number(state.current)
        )
        state.current = format_result(result)
        state.previous = state.current
    elif state.operator is None:
        state.previous = state.current

    state.operator = next_operator
    state.waiting_for_next_value = True


def evaluate(state: CalculatorState) -> None:
    """Complete the pending operation, or repeat the last one.

    With an operator pending and no second operand typed yet, the left
    operand is reused on the right, so ``5 + =`` shows ``10``.
    """
    clear_error_if_needed(state)

    if state.operator is not None:
        left = to_number(state.previous)
        right = left if state.waiting_for_next_value else to_number(state.current)
        result = apply_operator(state.operator, left, right)

        state.current = format_result(result)
        state.last_operator = state.operator
        state.last_operand = right

        state.operator = None
        state.previous = None
        state.waiting_for_next_value = True
        return

    if state.last_operator is not None and state.last_operand is not None:
        result = apply_operator(
            state.last_operator, to_number(state.current), state.last_operand
        )
        state.current = format_result(result)
        state.waiting_for_next_value = True


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _parse_action(action: Action | ActionKind | str, value: str | None) -> Action:
    if isinstance(action, Action):
        return action
    try:
        return Action.of(action, value)
    except ValueError as e:
        raise InvalidActionError(action, value, str(e)) from e


def handle_action(
    state: CalculatorState,
    action: Action | ActionKind | str,
    value: str | None = None,
) -> str:
    """Apply one action to `state` and return the resulting display.

    Raises:
        InvalidActionError: unknown kind, or a payload that does not fit it.
            The state is left untouched.
    """
    parsed = _parse_action(action, value)
    kind = parsed.kind

    if kind == ActionKind.DIGIT:
        input_digit(state, parsed.value)
    elif kind == ActionKind.DECIMAL:
        input_decimal(state)
    elif kind == ActionKind.OPERATOR:
        set_operator(state, parsed.value)
    elif kind == ActionKind.EQUALS:
        evaluate(state)
    elif kind == ActionKind.CLEAR:
        clear_all(state)
    elif kind == ActionKind.BACKSPACE:
        backspace(state)
    elif kind == ActionKind.SIGN:
        toggle_sign(state)
    elif kind == ActionKind.PERCENT:
        percentage(state)

    logger.debug("%s -> %r", parsed, state.current)
    return state.current
