"""Simple Event Bus / Observer implementation for planner notifications.

Event names used so far:
  settings.changed -> payload Settings (the new stored value)
  planner.meals_changed -> payload {"count": int}
  planner.selection_changed -> payload {"selected": [str, ...]}
  shopping.exported -> payload {"filename": str | None, "items": int, "cleared_selection": bool}
  storage.write_failed -> payload {"target": str, "error": str}

Subscribers are callables taking (event_name, payload). Each owner builds its
own bus and passes it to the collaborators that need it.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from threading import Lock
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
SETTINGS_CHANGED = "settings.changed"
MEALS_CHANGED = "planner.meals_changed"
SELECTION_CHANGED = "planner.selection_changed"
SHOPPING_EXPORTED = "shopping.exported"
STORAGE_WRITE_FAILED = "storage.write_failed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)
		self._lock = Lock()

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		with self._lock:
			if callback not in self._subscribers[event_name]:
				self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		with self._lock:
			try:
				self._subscribers[event_name].remove(callback)
			except (ValueError, KeyError):
				pass

	def publish(self, event_name: str, payload: Any = None):
		with self._lock:
			callbacks = list(self._subscribers.get(event_name, []))
		for cb in callbacks:
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = [
	'EventBus', 'SETTINGS_CHANGED', 'MEALS_CHANGED', 'SELECTION_CHANGED',
	'SHOPPING_EXPORTED', 'STORAGE_WRITE_FAILED'
]
