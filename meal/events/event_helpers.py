"""Event helper utilities.

This module provides helper functions for publishing planner events on a bus.

Quick import:
    from meal.events.event_helpers import (
        publish_meals_changed, publish_selection_changed,
        publish_shopping_exported, publish_storage_write_failed
    )

"""
from __future__ import annotations
from typing import Iterable, Optional
from .Event_Bus import (
    EventBus,
    MEALS_CHANGED, SELECTION_CHANGED, SHOPPING_EXPORTED, STORAGE_WRITE_FAILED
)

__all__ = [
    'publish_meals_changed', 'publish_selection_changed',
    'publish_shopping_exported', 'publish_storage_write_failed'
]


def publish_meals_changed(bus: Optional[EventBus], count: int):
    """Publish a planner.meals_changed event."""
    if bus is not None:
        bus.publish(MEALS_CHANGED, {'count': count})


def publish_selection_changed(bus: Optional[EventBus], selected: Iterable[str]):
    """Publish a planner.selection_changed event with the sorted selection."""
    if bus is not None:
        bus.publish(SELECTION_CHANGED, {'selected': sorted(selected)})


def publish_shopping_exported(bus: Optional[EventBus], filename: Optional[str], items: int, cleared_selection: bool):
    """Publish a shopping.exported event.

    Payload structure:
        {
          'filename': <str or None for a text share>,
          'items': <int>,
          'cleared_selection': <bool>
        }
    """
    if bus is not None:
        bus.publish(SHOPPING_EXPORTED, {
            'filename': filename,
            'items': items,
            'cleared_selection': cleared_selection
        })


def publish_storage_write_failed(bus: Optional[EventBus], target: str, error: BaseException):
    """Publish a storage.write_failed event."""
    if bus is not None:
        bus.publish(STORAGE_WRITE_FAILED, {'target': target, 'error': str(error)})
