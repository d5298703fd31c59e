"""
Event system for the cardwar runtime.

This module provides the event emitter the host runtime uses to report what
happens during a match. The pure game and player engines never emit events;
the runtime emits them after applying a transition, so listeners only ever
see models that were actually reached.

Event types are plain strings; an Enum member is keyed by its name, so
`emit(WarEventType.WAR_STARTED, ...)` and `emit("WAR_STARTED", ...)` reach
the same listeners.
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union
import logging
import threading

logger = logging.getLogger(__name__)

EventKey = Union[str, Enum]
Unsubscribe = Callable[[], None]


class EventPriority(Enum):
    """Priority levels for event handlers."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


@dataclass(eq=False)
class _Subscription:
    callback: Callable
    priority: EventPriority

    def outranks(self, other: "_Subscription") -> bool:
        return self.priority.value > other.priority.value


def _key(event_type: EventKey) -> str:
    return event_type.name if isinstance(event_type, Enum) else event_type


class EventEmitter:
    """
    Event emitter with priority-ordered subscriptions.

    Handlers with a higher priority run first; handlers with the same
    priority run in the order they subscribed. A handler that raises is
    logged and skipped, it never stops the emission or reaches the emitter.
    Subscribing and emitting are safe from several threads.
    """

    def __init__(self):
        self._listeners: Dict[str, List[_Subscription]] = defaultdict(list)
        self._global_listeners: List[_Subscription] = []
        self._listener_lock = threading.RLock()

    def _subscribe(self, queue: List[_Subscription], sub: _Subscription) -> Unsubscribe:
        with self._listener_lock:
            position = next(
                (i for i, other in enumerate(queue) if sub.outranks(other)), len(queue)
            )
            queue.insert(position, sub)

        def unsubscribe():
            with self._listener_lock:
                for i, other in enumerate(queue):
                    if other is sub:
                        del queue[i]
                        break

        return unsubscribe

    def on(
        self,
        event_type: EventKey,
        callback: Callable[[Dict[str, Any]], None],
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Unsubscribe:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to (string or enum)
            callback: Function to call when event occurs, signature: fn(event_data)
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        return self._subscribe(
            self._listeners[_key(event_type)], _Subscription(callback, priority)
        )

    def once(
        self,
        event_type: EventKey,
        callback: Callable[[Dict[str, Any]], None],
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Unsubscribe:
        """
        Subscribe to an event type for a single occurrence.

        The subscription is dropped before the callback runs, so it is gone
        even when the callback raises.
        """
        unsubscribe: Optional[Unsubscribe] = None

        def fire_once(event_data):
            unsubscribe()
            callback(event_data)

        unsubscribe = self.on(event_type, fire_once, priority)
        return unsubscribe

    def on_any(
        self,
        callback: Callable[[tuple], None],
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Unsubscribe:
        """
        Subscribe to all events.

        The callback receives a single `(event_name, event_data)` tuple.
        """
        return self._subscribe(self._global_listeners, _Subscription(callback, priority))

    def emit(self, event_type: EventKey, data: Dict[str, Any]) -> None:
        """
        Emit an event to all registered listeners.

        Args:
            event_type: The type of event to emit
            data: The data to include with the event
        """
        name = _key(event_type)

        with self._listener_lock:
            targets = [(sub.callback, data) for sub in self._listeners.get(name, ())]
            targets += [(sub.callback, (name, data)) for sub in self._global_listeners]

        # Handlers run outside the lock so they may subscribe or emit themselves
        for callback, payload in targets:
            try:
                callback(payload)
            except Exception:
                logger.error("Error in event handler for %s", name, exc_info=True)

    def remove_all_listeners(self, event_type: Optional[EventKey] = None) -> None:
        """
        Remove all listeners for a specific event type or all events.

        Args:
            event_type: Optional event type. If None, removes every listener,
                including the ones registered with `on_any`.
        """
        with self._listener_lock:
            if event_type is None:
                self._listeners.clear()
                self._global_listeners.clear()
            else:
                self._listeners.pop(_key(event_type), None)


class EventBus:
    """
    Global event bus for the application.

    This singleton class provides a centralized event bus that can be accessed
    from anywhere in the application.
    """

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> EventEmitter:
        """
        Get the singleton instance of the EventBus.

        Returns:
            EventEmitter instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = EventEmitter()
        return cls._instance


class WarEventType(Enum):
    """
    Event types emitted by the War runtime.
    """

    # Runtime lifecycle
    ENGINE_INIT = "engine_init"
    ENGINE_SHUTDOWN = "engine_shutdown"

    # Match lifecycle
    GAME_STARTED = "game_started"
    CARDS_DEALT = "cards_dealt"
    GAME_ENDED = "game_ended"
    GAME_ERROR = "game_error"

    # Rounds
    BATTLE_RESOLVED = "battle_resolved"
    WAR_STARTED = "war_started"
    WAR_RESOLVED = "war_resolved"

    # Host supervision
    MESSAGE_LIMIT_REACHED = "message_limit_reached"
