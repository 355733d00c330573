# tests/unit/test_configuration.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from unittest.mock import MagicMock

import pytest

from fluidstate.core.configuration import StateConfiguration
from fluidstate.core.errors import ConfigurationError
from tests.states import Events, States


@pytest.fixture
def configuration() -> StateConfiguration:
    return StateConfiguration(States.Off)


# -----------------------------------------------------------------------------
# TRANSITIONS
# -----------------------------------------------------------------------------


def test_state_is_recorded(configuration: StateConfiguration) -> None:
    assert configuration.state is States.Off
    assert not configuration.strict


def test_permit_returns_self(configuration: StateConfiguration) -> None:
    assert configuration.permit(Events.PowerOn, States.On) is configuration


def test_try_get_transition_found(configuration: StateConfiguration) -> None:
    configuration.permit(Events.PowerOn, States.On)
    assert configuration.try_get_transition(Events.PowerOn) == (True, States.On)


def test_try_get_transition_missing(configuration: StateConfiguration) -> None:
    assert configuration.try_get_transition(Events.PowerOff) == (False, None)


def test_permit_overwrites_destination(configuration: StateConfiguration) -> None:
    """Re-declaring a trigger replaces the previous destination."""
    configuration.permit(Events.PowerOn, States.On).permit(Events.PowerOn, States.Heating)
    assert configuration.try_get_transition(Events.PowerOn) == (True, States.Heating)
    assert configuration.permitted_triggers == (Events.PowerOn,)


def test_permit_allows_unconfigured_destination(configuration: StateConfiguration) -> None:
    configuration.permit(Events.StartCooling, "somewhere-else")
    assert configuration.try_get_transition(Events.StartCooling) == (True, "somewhere-else")


def test_permitted_triggers_in_declaration_order(configuration: StateConfiguration) -> None:
    configuration.permit(Events.StartHeating, States.Heating).permit(Events.PowerOn, States.On)
    assert configuration.permitted_triggers == (Events.StartHeating, Events.PowerOn)
    assert configuration.is_permitted(Events.PowerOn)
    assert not configuration.is_permitted(Events.PowerOff)


def test_overwrite_is_logged(configuration: StateConfiguration, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="fluidstate.core.configuration")
    configuration.permit(Events.PowerOn, States.On).permit(Events.PowerOn, States.Cooling)
    assert "Replacing transition Off -[PowerOn]-> On with Cooling" in caplog.text


# -----------------------------------------------------------------------------
# ACTIONS
# -----------------------------------------------------------------------------


def test_run_actions_without_callbacks_is_noop(configuration: StateConfiguration) -> None:
    configuration.run_entry_action()
    configuration.run_exit_action()


def test_entry_and_exit_actions_run(configuration: StateConfiguration) -> None:
    entry, exit_ = MagicMock(), MagicMock()
    assert configuration.on_entry(entry).on_exit(exit_) is configuration

    configuration.run_entry_action()
    entry.assert_called_once_with()
    exit_.assert_not_called()

    configuration.run_exit_action()
    exit_.assert_called_once_with()


def test_actions_overwrite_instead_of_stacking(configuration: StateConfiguration) -> None:
    first, second = MagicMock(), MagicMock()
    configuration.on_entry(first).on_entry(second)

    configuration.run_entry_action()

    first.assert_not_called()
    second.assert_called_once_with()
    assert configuration.entry_action is second


def test_non_callable_action_rejected(configuration: StateConfiguration) -> None:
    with pytest.raises(ConfigurationError, match="entry action for state Off must be callable"):
        configuration.on_entry("not callable")
    with pytest.raises(ConfigurationError, match="exit action"):
        configuration.on_exit(42)


def test_none_clears_action(configuration: StateConfiguration) -> None:
    entry, exit_ = MagicMock(), MagicMock()
    configuration.on_entry(entry).on_exit(exit_)

    assert configuration.on_entry(None).on_exit(None) is configuration
    configuration.run_entry_action()
    configuration.run_exit_action()

    assert configuration.entry_action is None
    assert configuration.exit_action is None
    entry.assert_not_called()
    exit_.assert_not_called()


def test_strict_allows_clearing_then_setting() -> None:
    configuration = StateConfiguration(States.Off, strict=True).on_entry(lambda: None)
    configuration.on_entry(None)
    configuration.on_entry(lambda: None)
    assert configuration.entry_action is not None


def test_coroutine_action_rejected_by_sync_run(configuration: StateConfiguration) -> None:
    calls = []

    async def entry() -> None:
        calls.append("entry")

    configuration.on_entry(entry)
    with pytest.raises(ConfigurationError, match="entry action for state Off is a coroutine action"):
        configuration.run_entry_action()
    assert calls == []


def test_action_exceptions_propagate(configuration: StateConfiguration) -> None:
    configuration.on_exit(MagicMock(side_effect=ValueError("exit failed")))
    with pytest.raises(ValueError, match="exit failed"):
        configuration.run_exit_action()


# -----------------------------------------------------------------------------
# STRICT MODE
# -----------------------------------------------------------------------------


def test_strict_rejects_duplicate_transition() -> None:
    configuration = StateConfiguration(States.Off, strict=True)
    configuration.permit(Events.PowerOn, States.On)

    with pytest.raises(ConfigurationError, match="using trigger PowerOn is already defined"):
        configuration.permit(Events.PowerOn, States.Heating)
    assert configuration.try_get_transition(Events.PowerOn) == (True, States.On)


def test_strict_rejects_duplicate_action() -> None:
    configuration = StateConfiguration(States.Off, strict=True).on_exit(lambda: None)
    with pytest.raises(ConfigurationError, match="exit action for state Off is already defined"):
        configuration.on_exit(lambda: None)


def test_repr() -> None:
    configuration = StateConfiguration(States.On).permit(Events.PowerOff, States.Off)
    assert repr(configuration) == "StateConfiguration(state=On, triggers=1)"
