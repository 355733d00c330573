"""
Core package: synchronous state machine, state configuration, hooks and errors.
"""

# Import order matters to avoid circular dependencies
from .errors import ConfigurationError, FluidStateError, InvalidTransitionError
from .hooks import HookManager, HookProtocol
from .configuration import StateConfiguration
from .state_machine import StateMachine

__all__ = [
    "FluidStateError",
    "InvalidTransitionError",
    "ConfigurationError",
    "HookManager",
    "HookProtocol",
    "StateConfiguration",
    "StateMachine",
]
