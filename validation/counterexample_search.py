"""Counterexample search: discovers gaps in the reducer or its tests.

This module runs independently of the test suite.  It searches for:

1. Rule violations: random action sequences after which some state rule
   no longer holds.
2. Scenario violations: scripted key sequences whose final display does
   not match the expected one (arithmetic pairs, division by zero,
   repeated equals, percent, sign toggling, clear idempotence).
3. Unexpected errors: any exception escaping the reducer for a valid
   action.

Run directly::

    python -m validation.counterexample_search [--walks N] [--seed S]
"""
from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass, field

from calculator import apply_operator, format_result, handle_action
from models import Action, ActionKind, CalculatorState, Operator
from rules import validate_state


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    actions: tuple[str, ...]
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category}")
                lines.append(f"      Actions:  {' '.join(cx.actions)}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found, all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Action generation
# ---------------------------------------------------------------------------

ALL_ACTIONS: list[Action] = (
    [Action(kind=ActionKind.DIGIT, value=d) for d in "0123456789"]
    + [Action(kind=ActionKind.OPERATOR, value=op.value) for op in Operator]
    + [
        Action(kind=kind)
        for kind in ActionKind
        if kind not in (ActionKind.DIGIT, ActionKind.OPERATOR)
    ]
)


def keys(text: str) -> list[Action]:
    """Translate compact key text like ``"12+3="`` into actions.

    ``C`` clears, ``<`` is backspace, ``~`` toggles sign.
    """
    special = {
        ".": ActionKind.DECIMAL,
        "=": ActionKind.EQUALS,
        "C": ActionKind.CLEAR,
        "<": ActionKind.BACKSPACE,
        "~": ActionKind.SIGN,
        "%": ActionKind.PERCENT,
    }
    actions = []
    for ch in text:
        if ch.isdigit():
            actions.append(Action(kind=ActionKind.DIGIT, value=ch))
        elif ch in "+-*/":
            actions.append(Action(kind=ActionKind.OPERATOR, value=ch))
        else:
            actions.append(Action(kind=special[ch]))
    return actions


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_rule_violations(
    rng: random.Random, walks: int, max_length: int = 40
) -> tuple[list[Counterexample], int]:
    """Random walks over the action alphabet, checking rules at every step."""
    cxs: list[Counterexample] = []
    checks = 0

    for _ in range(walks):
        state = CalculatorState()
        history: list[str] = []
        for _ in range(rng.randint(1, max_length)):
            action = rng.choice(ALL_ACTIONS)
            history.append(str(action))
            checks += 1
            try:
                handle_action(state, action)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    actions=tuple(history),
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Reducer raised for a valid action",
                ))
                break

            report = validate_state(state)
            if not report.passed:
                cxs.append(Counterexample(
                    category="rule_violation",
                    actions=tuple(history),
                    expected="all state rules hold",
                    actual=repr(state),
                    description=report.summary(),
                ))
                break

    return cxs, checks


def _scenarios(rng: random.Random, pairs: int) -> list[tuple[str, str, str]]:
    """(name, key text, expected display) triples."""
    scenarios = [
        ("decimal product", "7.5*2=", "15"),
        ("division by zero", "8/0=", "Error"),
        ("digit after error", "8/0=5", "5"),
        ("repeated equals", "5+3==", "11"),
        ("operand doubling", "5+=", "10"),
        ("percent", "50%", "0.5"),
        ("sign toggle", "5~", "-5"),
        ("sign toggle twice", "5~~", "5"),
        ("sign on zero", "~", "0"),
        ("backspace single digit", "5<", "0"),
        ("backspace negative digit", "5~<", "0"),
        ("clear twice", "12+3CC", "0"),
        ("float noise", ".1+.2=", "0.3"),
    ]
    ops = list(Operator)
    for _ in range(pairs):
        a = rng.randint(0, 99999)
        b = rng.randint(0, 99999)
        op = rng.choice(ops)
        expected = format_result(apply_operator(op, float(a), float(b)))
        scenarios.append((f"pair {a}{op.value}{b}", f"{a}{op.value}{b}=", expected))
    return scenarios


def search_scenario_violations(
    rng: random.Random, pairs: int
) -> tuple[list[Counterexample], int]:
    cxs: list[Counterexample] = []
    checks = 0

    for name, text, expected in _scenarios(rng, pairs):
        checks += 1
        state = CalculatorState()
        display = state.current
        for action in keys(text):
            display = handle_action(state, action)
        if display != expected:
            cxs.append(Counterexample(
                category="scenario_violation",
                actions=tuple(text),
                expected=expected,
                actual=display,
                description=f"Scenario '{name}' produced the wrong display",
            ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(seed: int = 0, walks: int = 2000, pairs: int = 200) -> SearchReport:
    rng = random.Random(seed)
    report = SearchReport()

    for cxs, checks in (
        search_rule_violations(rng, walks),
        search_scenario_violations(rng, pairs),
    ):
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--walks", type=int, default=2000)
    parser.add_argument("--pairs", type=int, default=200)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args(argv)

    report = run_search(seed=args.seed, walks=args.walks, pairs=args.pairs)
    print(report.summary())
    if not report.passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
