# fluidstate/core/configuration.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import inspect
import logging
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

from fluidstate.core.errors import ConfigurationError, describe

logger = logging.getLogger(__name__)

TState = TypeVar("TState")
TTrigger = TypeVar("TTrigger")

Action = Callable[[], None]


class StateConfiguration(Generic[TState, TTrigger]):
    """
    Transition table and entry/exit actions for a single state. Every setter
    mutates this object and returns it, so declarations can be chained:

        machine.configure(States.Off).permit(Events.PowerOn, States.On).on_exit(log_exit)

    Instances are normally obtained from ``StateMachine.configure`` rather than
    built directly.
    """

    def __init__(self, state: TState, strict: bool = False) -> None:
        """
        :param state: The state this configuration describes.
        :param strict: If True, redefining a transition or action raises ConfigurationError
                       instead of silently replacing it.
        """
        self._state = state
        self._strict = strict
        self._transitions: Dict[TTrigger, TState] = {}
        self._entry_action: Optional[Action] = None
        self._exit_action: Optional[Action] = None

    @property
    def state(self) -> TState:
        """The state this configuration describes."""
        return self._state

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def permitted_triggers(self) -> Tuple[TTrigger, ...]:
        """Triggers with a registered transition, in declaration order."""
        return tuple(self._transitions)

    @property
    def entry_action(self) -> Optional[Action]:
        return self._entry_action

    @property
    def exit_action(self) -> Optional[Action]:
        return self._exit_action

    def permit(self, trigger: TTrigger, destination: TState) -> "StateConfiguration[TState, TTrigger]":
        """
        Allow `trigger` to move the machine from this state to `destination`.
        The destination does not need to be configured.

        :param trigger: The trigger to accept in this state.
        :param destination: The state to move to when the trigger fires.
        :return: This configuration.
        :raises ConfigurationError: In strict mode, if the trigger already has a transition.
        """
        if trigger in self._transitions:
            if self._strict:
                raise ConfigurationError(
                    f"Transition from state {describe(self._state)} using trigger {describe(trigger)} is already defined"
                )
            logger.debug(
                "Replacing transition %s -[%s]-> %s with %s",
                describe(self._state),
                describe(trigger),
                describe(self._transitions[trigger]),
                describe(destination),
            )
        self._transitions[trigger] = destination
        return self

    def on_entry(self, action: Optional[Action]) -> "StateConfiguration[TState, TTrigger]":
        """
        Set the action run when the machine enters this state, replacing any previous one.

        :param action: Zero-argument callable, or None to clear the slot.
        :return: This configuration.
        """
        self._entry_action = self._checked_action("entry", action, self._entry_action)
        return self

    def on_exit(self, action: Optional[Action]) -> "StateConfiguration[TState, TTrigger]":
        """
        Set the action run when the machine leaves this state, replacing any previous one.

        :param action: Zero-argument callable, or None to clear the slot.
        :return: This configuration.
        """
        self._exit_action = self._checked_action("exit", action, self._exit_action)
        return self

    def try_get_transition(self, trigger: TTrigger) -> Tuple[bool, Optional[TState]]:
        """
        Look up the destination for `trigger` without side effects.

        :return: (True, destination) if a transition exists, otherwise (False, None).
        """
        if trigger in self._transitions:
            return True, self._transitions[trigger]
        return False, None

    def is_permitted(self, trigger: TTrigger) -> bool:
        return trigger in self._transitions

    def run_entry_action(self) -> None:
        """
        Invoke the entry action, if one is set.

        :raises ConfigurationError: If the action returns an awaitable.
        """
        self._run("entry", self._entry_action)

    def run_exit_action(self) -> None:
        """
        Invoke the exit action, if one is set.

        :raises ConfigurationError: If the action returns an awaitable.
        """
        self._run("exit", self._exit_action)

    def _run(self, kind: str, action: Optional[Action]) -> None:
        if action is None:
            return
        result = action()
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise ConfigurationError(
                f"The {kind} action for state {describe(self._state)} is a coroutine action and requires fire_async"
            )

    def _checked_action(self, kind: str, action: Optional[Action], current: Optional[Action]) -> Optional[Action]:
        if action is not None and not callable(action):
            raise ConfigurationError(f"The {kind} action for state {describe(self._state)} must be callable")
        if action is not None and current is not None:
            if self._strict:
                raise ConfigurationError(f"The {kind} action for state {describe(self._state)} is already defined")
            logger.debug("Replacing %s action of state %s", kind, describe(self._state))
        return action

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={describe(self._state)}, triggers={len(self._transitions)})"
