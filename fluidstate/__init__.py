"""fluidstate: fluent finite state machine builder

Callers declare states, the triggers each state permits and where they lead,
plus optional entry/exit actions. Firing a trigger runs the exit action of the
current state, switches state and runs the entry action of the new one.

Two flavours share the same configuration model:
    - StateMachine: synchronous, `fire` runs to completion on the caller's thread
    - AsyncStateMachine: `fire_async` can wait a configured delay before each
      entry/exit action without blocking the event loop

Neither flavour locks; concurrent firing on one machine must be serialized by
the caller.
"""

from .core import (
    ConfigurationError,
    FluidStateError,
    HookManager,
    HookProtocol,
    InvalidTransitionError,
    StateConfiguration,
    StateMachine,
)
from .runtime import AsyncStateConfiguration, AsyncStateMachine

__version__ = "0.1.0"

__all__ = [
    "StateMachine",
    "StateConfiguration",
    "AsyncStateMachine",
    "AsyncStateConfiguration",
    "FluidStateError",
    "InvalidTransitionError",
    "ConfigurationError",
    "HookManager",
    "HookProtocol",
    "__version__",
]
