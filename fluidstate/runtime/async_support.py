# fluidstate/runtime/async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import timedelta
from numbers import Real
from typing import Awaitable, Callable, Optional, Union

from fluidstate.core.configuration import StateConfiguration, TState, TTrigger
from fluidstate.core.errors import ConfigurationError, describe
from fluidstate.core.state_machine import StateMachine

logger = logging.getLogger(__name__)

Delay = Union[int, float, timedelta]
AsyncAction = Callable[[], Union[None, Awaitable[None]]]


def _to_milliseconds(delay: Delay) -> float:
    """
    Normalize a delay to milliseconds.

    :param delay: Milliseconds as a number, or a timedelta.
    :raises ConfigurationError: If the delay is negative or not a duration.
    """
    if isinstance(delay, timedelta):
        milliseconds = delay.total_seconds() * 1000.0
    elif isinstance(delay, Real) and not isinstance(delay, bool):
        milliseconds = float(delay)
    else:
        raise ConfigurationError(f"Delay must be a number of milliseconds or a timedelta, got {delay!r}")
    if milliseconds < 0:
        raise ConfigurationError(f"Delay cannot be negative: {delay!r}")
    return milliseconds


async def _call(action: Optional[AsyncAction]) -> None:
    if action is None:
        return
    result = action()
    if inspect.isawaitable(result):
        await result


class AsyncStateConfiguration(StateConfiguration[TState, TTrigger]):
    """
    State configuration for the delay-aware machine. Adds an entry delay and an
    exit delay, waited out before the matching action runs. Actions may be
    plain callables or coroutine functions.
    """

    def __init__(self, state: TState, strict: bool = False) -> None:
        super().__init__(state, strict=strict)
        self._entry_delay = 0.0
        self._exit_delay = 0.0

    @property
    def entry_delay(self) -> float:
        """Delay before the entry action, in milliseconds."""
        return self._entry_delay

    @property
    def exit_delay(self) -> float:
        """Delay before the exit action, in milliseconds."""
        return self._exit_delay

    def with_entry_delay(self, delay: Delay) -> "AsyncStateConfiguration[TState, TTrigger]":
        """
        Wait `delay` before running the entry action. Zero means no wait.

        :param delay: Milliseconds, or a timedelta.
        :return: This configuration.
        :raises ConfigurationError: If the delay is negative.
        """
        self._entry_delay = _to_milliseconds(delay)
        return self

    def with_exit_delay(self, delay: Delay) -> "AsyncStateConfiguration[TState, TTrigger]":
        """
        Wait `delay` before running the exit action. Zero means no wait.

        :param delay: Milliseconds, or a timedelta.
        :return: This configuration.
        :raises ConfigurationError: If the delay is negative.
        """
        self._exit_delay = _to_milliseconds(delay)
        return self

    def on_entry(self, action: Optional[AsyncAction]) -> "AsyncStateConfiguration[TState, TTrigger]":
        """
        Set the entry action. Coroutine functions are awaited by `fire_async` and
        rejected by the synchronous `fire`.

        :param action: Zero-argument callable or coroutine function, or None to clear the slot.
        :return: This configuration.
        """
        return super().on_entry(action)

    def on_exit(self, action: Optional[AsyncAction]) -> "AsyncStateConfiguration[TState, TTrigger]":
        """
        Set the exit action. Coroutine functions are awaited by `fire_async` and
        rejected by the synchronous `fire`.

        :param action: Zero-argument callable or coroutine function, or None to clear the slot.
        :return: This configuration.
        """
        return super().on_exit(action)

    async def run_entry_action_async(self) -> None:
        """Wait out the entry delay, even without an entry action, then run the action."""
        await self._wait("entry", self._entry_delay)
        await _call(self._entry_action)

    async def run_exit_action_async(self) -> None:
        """Wait out the exit delay, even without an exit action, then run the action."""
        await self._wait("exit", self._exit_delay)
        await _call(self._exit_action)

    async def _wait(self, kind: str, milliseconds: float) -> None:
        if milliseconds <= 0:
            return
        logger.debug("Waiting %sms before %s action of state %s", milliseconds, kind, describe(self._state))
        loop = asyncio.get_running_loop()
        deadline = loop.time() + milliseconds / 1000.0
        remaining = milliseconds / 1000.0
        # timer handles may run up to one clock tick early
        while remaining > 0:
            await asyncio.sleep(remaining)
            remaining = deadline - loop.time()


class AsyncStateMachine(StateMachine[TState, TTrigger]):
    """
    Delay-aware version of the state machine. `fire_async` suspends the calling
    task for each configured delay instead of blocking the thread.

    There is no lock around `fire_async`: two concurrent calls on the same
    machine race on the current state.
    """

    configuration_class = AsyncStateConfiguration

    def configure(self, state: TState) -> AsyncStateConfiguration:
        return super().configure(state)

    async def fire_async(self, trigger: TTrigger) -> None:
        """
        Process a trigger asynchronously. Follows the same rules as `fire`, but
        waits for the exit delay before the exit action and for the entry delay
        before the entry action. Completes once the whole sequence has run.

        :param trigger: The trigger to process.
        :raises InvalidTransitionError: If the current state is configured but does
                                        not permit the trigger.
        """
        try:
            resolved = self._resolve(trigger)
            if resolved is None:
                return
            source, destination = resolved

            await source.run_exit_action_async()
            await self._hook_manager.execute_on_exit_async(source.state)

            self._switch(source.state, destination, trigger)
            await self._hook_manager.execute_on_transition_async(source.state, destination, trigger)

            target = self._configurations.get(destination)
            if target is not None:
                await target.run_entry_action_async()
            await self._hook_manager.execute_on_enter_async(destination)
        except Exception as error:
            await self._report_error_async(error)
            raise

    async def _report_error_async(self, error: Exception) -> None:
        try:
            await self._hook_manager.execute_on_error_async(error)
        except Exception:
            logger.exception("on_error hook failed while handling %r", error)
