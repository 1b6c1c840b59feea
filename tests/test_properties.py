"""Property-based tests for the calculator reducer.

Uses Hypothesis to drive arbitrary action sequences through a state and
check that the display and state rules hold after every step.
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from calculator import apply_operator, format_result, handle_action
from keymap import replay
from keypad import ALL_ACTIONS, keys
from models import CalculatorState, Operator
from rules import validate_state


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

numeral_st = st.from_regex(r"[1-9][0-9]{0,5}(\.[0-9]{1,3})?", fullmatch=True)

integer_st = st.integers(min_value=1, max_value=999_999)

operator_st = st.sampled_from(list(Operator))

action_seq_st = st.lists(st.sampled_from(ALL_ACTIONS), max_size=60)


def _run(text: str) -> tuple[CalculatorState, str]:
    state = CalculatorState()
    return state, replay(state, keys(text))


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

@given(a=numeral_st, b=numeral_st, op=operator_st)
def test_binary_operation_matches_formatted_result(a, b, op):
    _, display = _run(f"{a}{op.value}{b}=")
    assert display == format_result(apply_operator(op, float(a), float(b)))


@given(a=numeral_st)
def test_division_by_zero_shows_error(a):
    _, display = _run(f"{a}/0=")
    assert display == "Error"


@given(a=numeral_st, digit=st.sampled_from("123456789"))
def test_digit_after_error_starts_fresh(a, digit):
    _, display = _run(f"{a}/0={digit}")
    assert display == digit


@given(a=integer_st, b=integer_st, op=st.sampled_from([Operator.ADD, Operator.SUBTRACT]))
def test_repeated_equals_reapplies_last_operand(a, b, op):
    _, display = _run(f"{a}{op.value}{b}==")
    first = format_result(apply_operator(op, float(a), float(b)))
    assert display == format_result(apply_operator(op, float(first), float(b)))


@given(a=numeral_st)
def test_sign_toggle_is_an_involution(a):
    _, display = _run(f"{a}~~")
    assert display == a


@given(a=integer_st)
def test_percent_divides_by_hundred(a):
    _, display = _run(f"{a}%")
    assert display == format_result(a / 100)


# ---------------------------------------------------------------------------
# Invariants over arbitrary sequences
# ---------------------------------------------------------------------------

@given(actions=action_seq_st)
def test_rules_hold_after_every_action(actions):
    state = CalculatorState()
    for action in actions:
        handle_action(state, action)
        report = validate_state(state)
        assert report.passed, report.summary()


@given(actions=action_seq_st)
def test_display_never_exceeds_width(actions):
    state = CalculatorState()
    for action in actions:
        assert len(handle_action(state, action)) <= 14


@given(actions=action_seq_st)
def test_clear_is_idempotent(actions):
    state = CalculatorState()
    replay(state, actions)
    replay(state, keys("C"))
    assert state == CalculatorState()
    replay(state, keys("C"))
    assert state == CalculatorState()


@given(actions=action_seq_st)
def test_handle_action_returns_current(actions):
    state = CalculatorState()
    for action in actions:
        assert handle_action(state, action) == state.current
