"""
Typed event bus for decoupled communication.

Event types are Enum members, so publishers and subscribers share a
vocabulary that is checked at import time instead of by string matching.

Usage:
    class BattleEvent(Enum):
        DISPLAY_EVENT = auto()

    bus.subscribe(BattleEvent.DISPLAY_EVENT, on_display_event)
    bus.publish(BattleEvent.DISPLAY_EVENT, kind=DisplayEvent.ENEMY_HEAL)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class EngineEvent(Enum):
    """Built-in engine lifecycle events."""
    GAME_START = auto()
    GAME_PAUSE = auto()
    GAME_RESUME = auto()
    GAME_QUIT = auto()

    SCENE_PUSHED = auto()
    SCENE_POPPED = auto()
    SCENE_SWITCHED = auto()


class AudioEvent(Enum):
    """Audio events."""
    SFX_PLAYED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Keyword data passed to publish()
        consumed: Set by a handler to stop propagation
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Stop delivering this event to lower-priority handlers."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central publish/subscribe hub.

    Features:
    - Enum-typed events
    - Priority ordering (higher runs first)
    - Weak references by default, so dead handlers drop out on their own
    - One-shot handlers
    - Consumption (a handler can stop propagation)
    - Events published from inside a handler are queued, not nested
    """

    def __init__(self):
        # event type -> [(priority, handler or weak ref, one_shot)]
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback taking the Event
            priority: Higher priority handlers are called first
            one_shot: Remove the handler after its first call
            weak: Hold the handler through a weak reference
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler

        handlers = self._handlers.setdefault(event_type, [])

        # Stable insert: equal priorities keep subscription order
        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler from an event type."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            entry for entry in self._handlers[event_type]
            if self._get_handler(entry[1]) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """Publish a pre-built event."""
        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

    def has_subscribers(self, event_type: Enum) -> bool:
        return bool(self._handlers.get(event_type))

    def clear(self, event_type: Enum | None = None) -> None:
        """Clear handlers for one event type, or all of them."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        handlers = self._handlers.get(event.type)
        if not handlers:
            return

        self._is_publishing = True
        to_remove = []

        try:
            for i, (_, handler_ref, one_shot) in enumerate(handlers):
                handler = self._get_handler(handler_ref)

                if handler is None:
                    # Weak reference was garbage collected
                    to_remove.append(i)
                    continue

                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error in event handler for {event.type}")

                if one_shot:
                    to_remove.append(i)

                if event.consumed:
                    break

            for i in reversed(to_remove):
                handlers.pop(i)
        finally:
            self._is_publishing = False

        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
