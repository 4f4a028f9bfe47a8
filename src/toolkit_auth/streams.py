"""Broadcast notification streams for session changes.

A UserStream delivers every published value synchronously, in order, to all
listeners registered at the moment of publishing. There is no replay and no
buffering: a listener added after a publish only sees later values, and a
publish with no listeners is simply not observed.

Usage:
    stream = UserStream("auth_state_changed")
    unsubscribe = stream.subscribe(lambda user: print(user))
    stream.publish(user)
    unsubscribe()
"""

from __future__ import annotations

__all__ = [
    "UserListener",
    "UserStream",
]

import threading
from typing import TYPE_CHECKING, Callable

from toolkit_auth.telemetry.system_logger import get_system_logger

if TYPE_CHECKING:
    from toolkit_auth.models import User

UserListener = Callable[["User | None"], None]


class UserStream:
    """Observer registry for one session channel.

    Listeners are called with the current user, or None after sign-out.
    Subscribing or unsubscribing from inside a listener is allowed: each
    publish iterates over a snapshot taken before the first call.
    """

    def __init__(self, name: str) -> None:
        """Initialize an empty stream.

        Args:
            name: Channel name used in log entries.
        """
        self.name = name
        self._listeners: list[UserListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        """Register a listener for all future publishes.

        Args:
            listener: Called with each published value.

        Returns:
            Callable that removes this registration.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: UserListener) -> None:
        """Remove one registration of listener. Unknown listeners are ignored."""
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    @property
    def subscriber_count(self) -> int:
        """Number of registered listeners."""
        with self._lock:
            return len(self._listeners)

    def publish(self, value: "User | None") -> None:
        """Deliver value to every listener registered right now.

        A listener that raises is logged and does not stop delivery to the
        others.
        """
        with self._lock:
            snapshot = list(self._listeners)

        for listener in snapshot:
            try:
                listener(value)
            except Exception:
                get_system_logger().error(
                    {
                        "event": "listener_failed",
                        "stream": self.name,
                        "listener": getattr(listener, "__qualname__", repr(listener)),
                    },
                    exc_info=True,
                )
