"""Calculator state rules.

Defines the invariants every CalculatorState must satisfy after any
action. Each rule is a callable predicate so the store, the test suite
and the counterexample search can all check states the same way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from models import ERROR_DISPLAY, MAX_LENGTH, CalculatorState, Operator


# ---------------------------------------------------------------------------
# Rule: a named, executable predicate over a state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rule:
    """A named invariant over calculator state."""

    id: str
    name: str
    description: str
    check: Callable[[CalculatorState], bool]


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------

def _display_within_width(s: CalculatorState) -> bool:
    return 0 < len(s.current) <= MAX_LENGTH


_NUMERAL = re.compile(r"-?\d+(\.\d*)?(e[+-]\d+)?")


def _display_is_numeral_or_error(s: CalculatorState) -> bool:
    return s.current == ERROR_DISPLAY or bool(_NUMERAL.fullmatch(s.current))


def _previous_requires_operator(s: CalculatorState) -> bool:
    return s.operator is not None or s.previous is None


def _operator_is_known(s: CalculatorState) -> bool:
    return s.operator is None or isinstance(s.operator, Operator)


def _memory_is_paired(s: CalculatorState) -> bool:
    return (s.last_operator is None) == (s.last_operand is None)


def _error_has_no_pending_input(s: CalculatorState) -> bool:
    """An error display is a finished result, waiting for fresh input."""
    if s.current != ERROR_DISPLAY:
        return True
    return s.waiting_for_next_value or s.operator is not None


STATE_RULES: list[Rule] = [
    Rule(
        id="STATE-WIDTH",
        name="display_within_width",
        description=f"Display must hold 1 to {MAX_LENGTH} characters",
        check=_display_within_width,
    ),
    Rule(
        id="STATE-NUMERAL",
        name="display_is_numeral_or_error",
        description="Display must parse as a number or be the error sentinel",
        check=_display_is_numeral_or_error,
    ),
    Rule(
        id="STATE-PREVIOUS",
        name="previous_requires_operator",
        description="A left operand may only be held while an operator is pending",
        check=_previous_requires_operator,
    ),
    Rule(
        id="STATE-OPERATOR",
        name="operator_is_known",
        description="Pending operator must be one of + - * /",
        check=_operator_is_known,
    ),
    Rule(
        id="STATE-MEMORY",
        name="memory_is_paired",
        description="Repeated-equals operator and operand are set together",
        check=_memory_is_paired,
    ),
    Rule(
        id="STATE-ERROR",
        name="error_has_no_pending_input",
        description="The error sentinel only appears as a computed result",
        check=_error_has_no_pending_input,
    ),
]


@dataclass(frozen=True)
class ValidationResult:
    rule_id: str
    rule_name: str
    passed: bool
    description: str


@dataclass(frozen=True)
class ValidationReport:
    results: list[ValidationResult]

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[ValidationResult]:
        return [r for r in self.results if not r.passed]

    def summary(self) -> str:
        total = len(self.results)
        failed = len(self.failures)
        if failed == 0:
            return f"All {total} rules passed"
        lines = [f"{failed}/{total} rules failed:"]
        for f in self.failures:
            lines.append(f"  [{f.rule_id}] {f.rule_name}: {f.description}")
        return "\n".join(lines)


def validate_state(state: CalculatorState) -> ValidationReport:
    """Run every state rule and return a report."""
    results = []
    for rule in STATE_RULES:
        try:
            passed = rule.check(state)
        except Exception:
            passed = False
        results.append(
            ValidationResult(
                rule_id=rule.id,
                rule_name=rule.name,
                passed=passed,
                description=rule.description,
            )
        )
    return ValidationReport(results=results)
