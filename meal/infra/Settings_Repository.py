"""Settings repository: JSON-backed preferences with change notification."""
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, Optional

from meal.domain.Settings import Settings
from meal.events.Event_Bus import EventBus, SETTINGS_CHANGED
from meal.infra.json_store import atomic_write_json, read_json
from meal.infra.paths import SETTINGS_FILE

logger = logging.getLogger(__name__)

WriteHandler = Callable[[Dict[str, Any]], Settings]


class SettingsRepository:
    """Stores Settings in a JSON file and publishes ``settings.changed`` after each write.

    Subscribers receive ``(event_name, settings)`` and see the value only once
    it is on disk. An owner of related state (the planner) can register a
    write handler: every ``set_*`` call is then handed to it, and the handler
    decides when ``write`` runs.
    """

    def __init__(self, path: Optional[Path] = None, bus: Optional[EventBus] = None):
        self.path = Path(path) if path is not None else SETTINGS_FILE
        self.bus = bus or EventBus()
        self._lock = Lock()
        self._write_handler: Optional[WriteHandler] = None

    def load(self) -> Settings:
        return Settings.from_dict(read_json(self.path, {}))

    def subscribe(self, callback: Callable[[str, Any], None]) -> None:
        self.bus.subscribe(SETTINGS_CHANGED, callback)

    def unsubscribe(self, callback: Callable[[str, Any], None]) -> None:
        self.bus.unsubscribe(SETTINGS_CHANGED, callback)

    def set_write_handler(self, handler: WriteHandler) -> None:
        self._write_handler = handler

    def remove_write_handler(self, handler: WriteHandler) -> None:
        if self._write_handler == handler:
            self._write_handler = None

    def update(self, **changes) -> Settings:
        handler = self._write_handler
        if handler is None:
            return self.write(**changes)
        return handler(changes)

    def write(self, **changes) -> Settings:
        """Persist ``changes`` on top of the stored settings, then publish the result."""
        with self._lock:
            settings = self.load().replace(**changes)
            atomic_write_json(self.path, settings.to_dict())
        logger.info("Settings updated: %s", changes)
        self.bus.publish(SETTINGS_CHANGED, settings)
        return settings

    def set_persist_data_between_launches(self, value: bool) -> Settings:
        return self.update(persist_data_between_launches=bool(value))

    def set_clear_shopping_after_export(self, value: bool) -> Settings:
        return self.update(clear_shopping_after_export=bool(value))

    def set_theme_mode(self, mode: str) -> Settings:
        return self.update(theme_mode=mode)

    def set_accent_palette(self, palette: str) -> Settings:
        return self.update(accent_palette=palette)

    def set_density_mode(self, mode: str) -> Settings:
        return self.update(density_mode=mode)
