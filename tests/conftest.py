"""Shared fixtures for calculator tests."""

from __future__ import annotations

import os

import pytest
from hypothesis import Verbosity, settings

from keymap import replay
from keypad import keys
from models import CalculatorState

settings.register_profile("ci", max_examples=200, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def state() -> CalculatorState:
    return CalculatorState()


@pytest.fixture
def press(state):
    """Feed compact key text (``"12+3="``, ``C`` clear, ``<`` backspace,
    ``~`` sign) into the `state` fixture and return the display."""

    def _press(text: str) -> str:
        return replay(state, keys(text))

    return _press
