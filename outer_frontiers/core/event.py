"""Simple event system for observer pattern."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Event(Generic[T]):
    """
    Ordered list of handlers called with one argument.

    Usage:
        on_exit: Event[World] = Event()
        on_exit += extract_model_colliders   # subscribe
        on_exit.emit(world)                  # notify in subscription order

    Handlers run in the order they were added, which is how state hooks
    express "A before B" ordering.
    """

    def __init__(self):
        self._handlers: list[Callable[[T], None]] = []

    def __iadd__(self, handler: Callable[[T], None]) -> "Event[T]":
        """Subscribe to event: event += handler"""
        if handler not in self._handlers:
            self._handlers.append(handler)
        return self

    def __isub__(self, handler: Callable[[T], None]) -> "Event[T]":
        """Unsubscribe from event: event -= handler"""
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def emit(self, value: T) -> None:
        for handler in list(self._handlers):
            handler(value)

    def __len__(self) -> int:
        return len(self._handlers)
