# fluidstate/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Dict, Generic, List, Optional, Tuple, Type

from fluidstate.core.configuration import StateConfiguration, TState, TTrigger
from fluidstate.core.errors import InvalidTransitionError, describe
from fluidstate.core.hooks import HookManager, HookProtocol

logger = logging.getLogger(__name__)


class StateMachine(Generic[TState, TTrigger]):
    """
    A flat finite state machine. States and triggers are arbitrary hashable
    values, usually enum members. Each state is described by a
    StateConfiguration created on demand through `configure`.

    The machine holds no locks; callers firing from several threads must
    serialize access themselves.
    """

    configuration_class: Type[StateConfiguration] = StateConfiguration

    def __init__(
        self,
        initial_state: TState,
        hooks: Optional[List[HookProtocol]] = None,
        strict: bool = False,
    ) -> None:
        """
        :param initial_state: The state in which this machine begins.
        :param hooks: Optional list of hook objects implementing on_exit, on_enter,
                      on_transition and/or on_error.
        :param strict: If True, firing from an unconfigured state raises
                       InvalidTransitionError and configurations reject redefinitions.
        """
        self._current_state = initial_state
        self._configurations: Dict[TState, StateConfiguration] = {}
        self._hook_manager = HookManager(hooks)
        self._strict = strict

    @property
    def current_state(self) -> TState:
        """Get the current active state."""
        return self._current_state

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def hook_manager(self) -> HookManager:
        return self._hook_manager

    @property
    def configured_states(self) -> Tuple[TState, ...]:
        """States that have a configuration, in the order they were first configured."""
        return tuple(self._configurations)

    def configure(self, state: TState) -> StateConfiguration:
        """
        Return the configuration for `state`, creating an empty one on first use.
        Repeated calls return the same object.
        """
        configuration = self._configurations.get(state)
        if configuration is None:
            configuration = self.configuration_class(state, strict=self._strict)
            self._configurations[state] = configuration
            logger.debug("Configured state %s", describe(state))
        return configuration

    def is_configured(self, state: TState) -> bool:
        return state in self._configurations

    def can_fire(self, trigger: TTrigger) -> bool:
        """
        Check whether firing `trigger` now would change state.

        :return: True if the current state is configured and permits the trigger.
        """
        configuration = self._configurations.get(self._current_state)
        return configuration is not None and configuration.is_permitted(trigger)

    def fire(self, trigger: TTrigger) -> None:
        """
        Process a trigger against the current state.

        If the current state has no configuration the call does nothing. Otherwise
        the exit action of the current state runs, the current state changes, and
        the entry action of the destination runs if the destination is configured.

        :param trigger: The trigger to process.
        :raises InvalidTransitionError: If the current state is configured but does
                                        not permit the trigger.
        """
        try:
            resolved = self._resolve(trigger)
            if resolved is None:
                return
            source, destination = resolved

            source.run_exit_action()
            self._hook_manager.execute_on_exit(source.state)

            self._switch(source.state, destination, trigger)
            self._hook_manager.execute_on_transition(source.state, destination, trigger)

            target = self._configurations.get(destination)
            if target is not None:
                target.run_entry_action()
            self._hook_manager.execute_on_enter(destination)
        except Exception as error:
            self._report_error(error)
            raise

    def _resolve(self, trigger: TTrigger) -> Optional[Tuple[StateConfiguration, TState]]:
        """
        Find the configuration of the current state and the destination for `trigger`.

        :return: (source configuration, destination), or None if the current state
                 is not configured and the trigger should be ignored.
        :raises InvalidTransitionError: If no transition applies.
        """
        configuration = self._configurations.get(self._current_state)
        if configuration is None:
            if self._strict:
                raise InvalidTransitionError(self._current_state, trigger)
            logger.debug(
                "Ignoring trigger %s: state %s is not configured", describe(trigger), describe(self._current_state)
            )
            return None

        found, destination = configuration.try_get_transition(trigger)
        if not found:
            raise InvalidTransitionError(self._current_state, trigger)
        return configuration, destination

    def _report_error(self, error: Exception) -> None:
        """
        Pass `error` to the on_error hooks. A failing hook is logged so the
        original error is the one the caller sees.
        """
        try:
            self._hook_manager.execute_on_error(error)
        except Exception:
            logger.exception("on_error hook failed while handling %r", error)

    def _switch(self, source: TState, destination: TState, trigger: TTrigger) -> None:
        self._current_state = destination
        logger.debug("Transitioned %s -[%s]-> %s", describe(source), describe(trigger), describe(destination))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(current_state={describe(self._current_state)})"
