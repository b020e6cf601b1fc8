"""Observable state primitives for view models.

``ObservableField`` keeps the last published value and a list of
subscribers. ``MappedField`` is a read-only projection of another field.
``NavigationSignal`` holds at most one pending event which is cleared once
the view acknowledges it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Unsubscribe = Callable[[], None]

_UNSET = object()


def _notify(
    observers: list[Callable[[T], None]],
    value: T,
    name: str,
    still_current: Callable[[], bool] = lambda: True,
) -> None:
    # Copy so observers may unsubscribe from inside their callback.
    for observer in list(observers):
        # A callback replaced or cleared the value; later observers must not
        # receive the stale one.
        if not still_current():
            return
        try:
            observer(value)
        except Exception:
            logger.exception("Observer of %s raised", name)


class ObservableField(Generic[T]):
    """A value holder that notifies subscribers on every ``set``."""

    def __init__(self, initial: T | object = _UNSET, *, name: str = "field") -> None:
        self._value = initial
        self._version = 0
        self._observers: list[Callable[[T], None]] = []
        self.name = name

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T | None:
        if self._value is _UNSET:
            return None
        return self._value  # type: ignore[return-value]

    def set(self, value: T) -> None:
        """Store ``value`` and notify subscribers.

        A ``set`` made from inside a callback takes over: the outer dispatch
        stops and remaining observers only see the newer value.
        """
        self._value = value
        self._version += 1
        version = self._version
        _notify(
            self._observers, value, self.name, lambda: self._version == version
        )

    def subscribe(self, observer: Callable[[T], None], *, replay: bool = True) -> Unsubscribe:
        """Register ``observer``; returns a callable that removes it.

        With ``replay`` the observer immediately receives the current value,
        if one has been set.
        """
        self._observers.append(observer)
        if replay and self._value is not _UNSET:
            _notify([observer], self._value, self.name)  # type: ignore[arg-type]

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def map(self, transform: Callable[[T], R], *, name: str | None = None) -> MappedField[T, R]:
        return MappedField(self, transform, name=name or f"{self.name}.map")


class MappedField(Generic[T, R]):
    """Read-only projection of an ``ObservableField``.

    The value is computed from the source on every read, so two projections
    of the same source never disagree.
    """

    def __init__(
        self,
        source: ObservableField[T],
        transform: Callable[[T], R],
        *,
        name: str = "mapped",
    ) -> None:
        self._source = source
        self._transform = transform
        self.name = name

    @property
    def has_value(self) -> bool:
        return self._source.has_value

    @property
    def value(self) -> R | None:
        if not self._source.has_value:
            return None
        return self._transform(self._source.value)  # type: ignore[arg-type]

    def subscribe(self, observer: Callable[[R], None], *, replay: bool = True) -> Unsubscribe:
        def forward(value: T) -> None:
            observer(self._transform(value))

        return self._source.subscribe(forward, replay=replay)


class NavigationSignal(Generic[T]):
    """One-shot event slot: either pending with one item, or empty."""

    def __init__(self, *, name: str = "navigation") -> None:
        self._pending: tuple[T] | None = None
        self._observers: list[Callable[[T], None]] = []
        self.name = name

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def peek(self) -> T | None:
        return self._pending[0] if self._pending is not None else None

    def emit(self, item: T) -> None:
        """Make ``item`` pending and deliver it.

        Delivery stops as soon as an observer clears or replaces the slot.
        """
        pending = (item,)
        self._pending = pending
        _notify(self._observers, item, self.name, lambda: self._pending is pending)

    def consume(self) -> T | None:
        """Return the pending item and clear the slot."""
        item = self.peek()
        self._pending = None
        return item

    def clear(self) -> None:
        self._pending = None

    def subscribe(self, observer: Callable[[T], None]) -> Unsubscribe:
        """Register ``observer`` for emitted items.

        A pending item is delivered immediately; it keeps being delivered to
        new subscribers until someone clears the slot.
        """
        self._observers.append(observer)
        if self._pending is not None:
            _notify([observer], self._pending[0], self.name)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe
