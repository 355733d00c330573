"""
Runtime package for the delay-aware, asyncio-based state machine.
"""

from .async_support import AsyncStateConfiguration, AsyncStateMachine

__all__ = ["AsyncStateConfiguration", "AsyncStateMachine"]
