"""Lazily created process-wide service handles.

A ProcessWide holds one service instance for the whole process. The factory
runs at most once per reset, on first access, under a lock; readers either
see no instance or a fully constructed one.

Thread Safety:
    Double-checked locking. The fast path reads the published reference
    without the lock; construction and reset take the lock.

Python 3.11+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Lock
from typing import Generic, TypeVar

__all__ = ["ProcessWide"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProcessWide(Generic[T]):
    """Single-initialization holder for a process-wide service.

    Example:
        >>> holder = ProcessWide("greeting", lambda: "hello")
        >>> holder.get()
        'hello'
        >>> holder.is_initialized
        True
    """

    __slots__ = ("_factory", "_instance", "_lock", "_name")

    def __init__(self, name: str, factory: Callable[[], T]) -> None:
        """Create an empty holder.

        Args:
            name: Name used in log messages
            factory: Zero-argument constructor for the instance
        """
        self._name = name
        self._factory = factory
        self._instance: T | None = None
        self._lock = Lock()

    @property
    def is_initialized(self) -> bool:
        """Whether the instance has been created."""
        return self._instance is not None

    def get(self) -> T:
        """Return the instance, creating it on first access."""
        instance = self._instance
        if instance is not None:
            return instance
        with self._lock:
            if self._instance is None:
                self._instance = self._factory()
                logger.debug("Initialized process-wide %s", self._name)
            return self._instance

    def reset(self) -> None:
        """Drop the instance; the next get() creates a new one."""
        with self._lock:
            self._instance = None
