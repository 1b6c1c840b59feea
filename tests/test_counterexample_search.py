"""Tests for the standalone counterexample search."""

from __future__ import annotations

import pytest

from models import ActionKind
from validation.counterexample_search import (
    ALL_ACTIONS,
    Counterexample,
    SearchReport,
    keys,
    main,
    run_search,
)


def test_action_alphabet_covers_every_kind():
    assert {a.kind for a in ALL_ACTIONS} == set(ActionKind)
    assert len(ALL_ACTIONS) == 10 + 4 + 6


def test_keys_translation():
    kinds = [a.kind for a in keys("1.+~<%=C")]
    assert kinds == [
        ActionKind.DIGIT,
        ActionKind.DECIMAL,
        ActionKind.OPERATOR,
        ActionKind.SIGN,
        ActionKind.BACKSPACE,
        ActionKind.PERCENT,
        ActionKind.EQUALS,
        ActionKind.CLEAR,
    ]


def test_search_finds_nothing():
    report = run_search(seed=7, walks=200, pairs=50)
    assert report.passed, report.summary()
    assert report.checks_run > 200


def test_report_summary_lists_counterexamples():
    report = SearchReport(checks_run=1)
    report.counterexamples.append(Counterexample(
        category="scenario_violation",
        actions=tuple("1+1="),
        expected="2",
        actual="3",
        description="Scenario 'one plus one' produced the wrong display",
    ))
    summary = report.summary()
    assert not report.passed
    assert "Counterexamples found: 1" in summary
    assert "1 + 1 =" in summary


def test_main_exits_cleanly(capsys):
    main(["--walks", "20", "--pairs", "5", "--seed", "3"])
    assert "No counterexamples found" in capsys.readouterr().out


def test_main_rejects_bad_arguments():
    with pytest.raises(SystemExit):
        main(["--walks", "many"])
