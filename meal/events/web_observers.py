"""Web-facing observer for planner events.

EventLog subscribes to a bus for:
  - planner.meals_changed
  - planner.selection_changed
  - shopping.exported
  - storage.write_failed

and stores a lightweight in-memory ring buffer of recent events that the web
layer can query so a client sees exports and storage failures without
reloading.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer; bus callbacks may arrive from the storage
    writer thread.
  * MAX_EVENTS caps memory use.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    EventBus, MEALS_CHANGED, SELECTION_CHANGED, SHOPPING_EXPORTED, STORAGE_WRITE_FAILED
)

logger = logging.getLogger(__name__)

MAX_EVENTS = 300  # keep a few hundred recent events
OBSERVED_EVENTS = (MEALS_CHANGED, SELECTION_CHANGED, SHOPPING_EXPORTED, STORAGE_WRITE_FAILED)


class EventLog:
    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self._max_events = max_events
        self._started = False

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        with self._lock:
            evt = {
                'id': self._next_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
            }
            if isinstance(payload, dict):
                for k, v in payload.items():
                    evt.setdefault(k, v)
            self._events.append(evt)
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self._max_events:
                del self._events[: len(self._events) - self._max_events]
        if event_name == STORAGE_WRITE_FAILED:
            logger.warning("Storage write failed: %s", payload)

    def start(self, bus: EventBus):
        """Idempotent start: subscribe to the bus once."""
        if self._started:
            return
        for event_name in OBSERVED_EVENTS:
            bus.subscribe(event_name, self._record)
        self._started = True

    def get_events(self, since: int | None = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        If since is None, returns the last N (up to MAX_EVENTS) events.
        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['EventLog', 'MAX_EVENTS']
