"""
Event system for the cardwar runtime.

This package provides the event bus the host runtime reports match progress on.
"""

from cardwar.events.emitter import (
    EventEmitter,
    EventBus,
    EventPriority,
    WarEventType,
)

__all__ = ["EventEmitter", "EventBus", "EventPriority", "WarEventType"]
