# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from fluidstate import AsyncStateMachine, StateMachine
from tests.states import Events, RecordingHook, States


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "timing: mark test as depending on wall-clock delays")


@pytest.fixture
def machine():
    """A synchronous machine starting in Off with nothing configured."""
    return StateMachine(States.Off)


@pytest.fixture
def async_machine():
    """A delay-aware machine starting in Off with nothing configured."""
    return AsyncStateMachine(States.Off)


@pytest.fixture
def hook():
    """A hook object recording lifecycle calls."""
    return RecordingHook()


@pytest.fixture
def power_machine():
    """Off <-> On machine."""
    sm = StateMachine(States.Off)
    sm.configure(States.Off).permit(Events.PowerOn, States.On)
    sm.configure(States.On).permit(Events.PowerOff, States.Off)
    return sm
