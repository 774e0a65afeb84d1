# =============================================================================
# lib/lazy_resource.py - Lazily Initialized Shared Resources
# =============================================================================
# Holds one expensive object (an API client, a loaded tool) that is created
# on first use and shared afterwards.
#
# - get() runs the factory at most once at a time, under an asyncio.Lock
# - a failing factory caches nothing; the next get() tries again
# - invalidate() drops the cached object so the next get() rebuilds it
#
# Usage:
#   from lib.lazy_resource import LazyResource
#   openai_client = LazyResource(lambda: AsyncOpenAI(api_key=...), name="openai")
#   client = await openai_client.get()
# =============================================================================

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LazyResource(Generic[T]):
    """
    Memoized singleton with explicit invalidation.

    The factory may be a plain callable or a coroutine function.

    Example:
        resource = LazyResource(create_client, name="supabase")
        client = await resource.get()
        ...
        resource.invalidate()  # e.g. after an auth failure
    """

    def __init__(
        self,
        factory: Callable[[], T | Awaitable[T]],
        name: str = "resource",
    ):
        self._factory = factory
        self._name = name
        self._value: T | None = None
        self._initialized = False
        self._lock: asyncio.Lock | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _get_lock(self) -> asyncio.Lock:
        # Created lazily so the resource can be built at import time,
        # outside any event loop.
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def get(self) -> T:
        """
        Return the shared object, creating it on first use.

        Raises:
            Whatever the factory raises. Nothing is cached in that case.
        """
        if self._initialized:
            return self._value  # type: ignore[return-value]

        async with self._get_lock():
            # Another waiter may have finished initialization first
            if self._initialized:
                return self._value  # type: ignore[return-value]

            try:
                value: Any = self._factory()
                if inspect.isawaitable(value):
                    value = await value
            except Exception as e:
                logger.warning(f"Failed to initialize {self._name}: {e}")
                raise

            self._value = value
            self._initialized = True
            logger.debug(f"Initialized {self._name}")
            return value

    def peek(self) -> T | None:
        """Return the cached object without creating it."""
        return self._value if self._initialized else None

    def invalidate(self) -> None:
        """Drop the cached object. The next get() calls the factory again."""
        if self._initialized:
            logger.info(f"Invalidating {self._name}")
        self._value = None
        self._initialized = False
