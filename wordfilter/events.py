"""
Event bus used to decouple the filter engine from its surroundings.

The engine publishes ``filter_rules_changed`` after every mutation and
listens for ``filter_preset_selected`` / ``filter_config_changed`` so a
chat server or admin panel can reconfigure it without holding a
reference.  The filter logger publishes ``log_entry`` for each check.

Checks run on whatever thread the chat server handles a message on, and
a server has no Qt event loop to drain queued signals.  Every callback
is therefore connected with ``DirectConnection``: it runs synchronously
on the publishing thread, and subscribers that touch shared state must
guard it themselves.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from PyQt6.QtCore import QObject, Qt, pyqtSignal

Callback = Callable[[dict[str, Any]], None]


class _Channel(QObject):
    """One named channel carrying a dict payload."""
    fired = pyqtSignal(dict)


class EventBus(QObject):
    """
    Publish/subscribe hub keyed by event name.

    Safe to publish from any thread.  Channels are created lazily on first
    use and are never parented, so a worker thread may be the one that
    creates them.

    Usage
    -----
    bus = EventBus()
    bus.subscribe("filter_rules_changed", lambda d: print(d["change"]))
    bus.publish("filter_preset_selected", {"preset": "business"})
    """

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._channels: dict[str, _Channel] = {}
        self._channels_lock = threading.Lock()

    def _ensure(self, event: str) -> _Channel:
        with self._channels_lock:
            channel = self._channels.get(event)
            if channel is None:
                channel = self._channels[event] = _Channel()
            return channel

    def subscribe(self, event: str, callback: Callback) -> None:
        self._ensure(event).fired.connect(callback, Qt.ConnectionType.DirectConnection)

    def unsubscribe(self, event: str, callback: Callback) -> None:
        with self._channels_lock:
            channel = self._channels.get(event)
        if channel is None:
            return
        try:
            channel.fired.disconnect(callback)
        except TypeError:
            pass

    def publish(self, event: str, data: dict[str, Any] | None = None) -> None:
        if data is None:
            data = {}
        self._ensure(event).fired.emit(data)
