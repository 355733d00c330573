# fluidstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from enum import Enum
from typing import Any


def describe(value: Any) -> str:
    """
    Render a state or trigger identifier for messages and logs. Enum members
    render as their bare name so messages read "Off" rather than "States.Off".
    """
    if isinstance(value, Enum):
        return value.name
    return str(value)


class FluidStateError(Exception):
    """
    Base exception class for errors raised by the state machine library.
    """


class InvalidTransitionError(FluidStateError):
    """
    Raised when a trigger is fired from a state that has no transition
    registered for it.
    """

    def __init__(self, state: Any, trigger: Any) -> None:
        """
        :param state: The state the machine was in when the trigger was fired.
        :param trigger: The trigger that could not be handled.
        """
        super().__init__(f"No transition defined from state {describe(state)} using trigger {describe(trigger)}")
        self.state = state
        self.trigger = trigger


class ConfigurationError(FluidStateError):
    """
    Raised when a state configuration receives invalid input, or when strict
    mode detects a redefinition.
    """
