# fluidstate/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import inspect
from typing import Any, List, Optional, Protocol


class HookProtocol(Protocol):
    """
    Observer interface for state machine lifecycle events. A hook may implement
    any subset of these methods; missing ones are skipped. Async machines await
    hook methods that are coroutine functions.
    """

    def on_exit(self, state: Any) -> None: ...

    def on_enter(self, state: Any) -> None: ...

    def on_transition(self, source: Any, destination: Any, trigger: Any) -> None: ...

    def on_error(self, error: Exception) -> None: ...


class HookManager:
    """
    Manages the registration and execution of hooks that listen to state machine
    lifecycle events (on_exit, on_enter, on_transition, on_error). Users can
    attach logging, monitoring, or custom side effects without altering core logic.
    """

    def __init__(self, hooks: Optional[List[HookProtocol]] = None) -> None:
        """
        Initialize with an optional list of hook objects.
        """
        self._hooks: List[HookProtocol] = list(hooks or [])

    @property
    def hooks(self) -> List[HookProtocol]:
        """A copy of the registered hooks."""
        return list(self._hooks)

    def register_hook(self, hook: HookProtocol) -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object implementing some of the HookProtocol methods.
        """
        self._hooks.append(hook)

    def execute_on_exit(self, state: Any) -> None:
        self._invoke("on_exit", state)

    def execute_on_enter(self, state: Any) -> None:
        self._invoke("on_enter", state)

    def execute_on_transition(self, source: Any, destination: Any, trigger: Any) -> None:
        self._invoke("on_transition", source, destination, trigger)

    def execute_on_error(self, error: Exception) -> None:
        self._invoke("on_error", error)

    async def execute_on_exit_async(self, state: Any) -> None:
        await self._invoke_async("on_exit", state)

    async def execute_on_enter_async(self, state: Any) -> None:
        await self._invoke_async("on_enter", state)

    async def execute_on_transition_async(self, source: Any, destination: Any, trigger: Any) -> None:
        await self._invoke_async("on_transition", source, destination, trigger)

    async def execute_on_error_async(self, error: Exception) -> None:
        await self._invoke_async("on_error", error)

    def _invoke(self, method: str, *args: Any) -> None:
        """
        Call `method` on every hook that defines it. Coroutine hook methods are
        skipped because there is no loop to await them on.
        """
        for hook in self._hooks:
            callback = getattr(hook, method, None)
            if callback is not None and not inspect.iscoroutinefunction(callback):
                callback(*args)

    async def _invoke_async(self, method: str, *args: Any) -> None:
        for hook in self._hooks:
            callback = getattr(hook, method, None)
            if callback is None:
                continue
            if inspect.iscoroutinefunction(callback):
                await callback(*args)
            else:
                callback(*args)
