"""Planner service: the single owner of the meal list, the meal groups and the shopping selection.

Every state transition (meal added or removed, selection toggled, settings
applied) runs under one lock, so readers only ever observe completed
transitions. Durable writes are queued on a single background writer while
the lock is held and executed after it is released: they never overlap and
run in the order the transitions happened, so the last queued snapshot is
what ends up on disk.

Settings go through the same writer. While the service is started it is
registered as the settings repository's write handler, so a ``set_*`` call
made directly on the repository is applied here first and queued behind any
meal snapshot it depends on.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Set, Tuple

from meal.domain.Meal import Meal
from meal.domain.Settings import Settings
from meal.domain.ShoppingList import ExportResult, ShoppingEntry
from meal.domain.errors import DuplicateMealError, MealNotFoundError
from meal.events.Event_Bus import EventBus
from meal.events.event_helpers import (
    publish_meals_changed,
    publish_selection_changed,
    publish_shopping_exported,
    publish_storage_write_failed,
)
from meal.infra.Meal_Repository import MealRepository, normalize_groups
from meal.infra.Settings_Repository import SettingsRepository
from meal.logic.persistence.gate import PersistenceGate, PersistenceTransition
from meal.logic.selection.tracker import SelectionTracker
from meal.logic.shopping.list_builder import build_shopping_list, build_shopping_list_message
from meal.utilities.constants import DEFAULT_MEAL_GROUPS, UNCATEGORIZED_GROUP

logger = logging.getLogger(__name__)

Snapshot = Tuple[List[Meal], List[str]]


class PlannerService:
    def __init__(self, meal_repository: MealRepository, settings_repository: SettingsRepository,
                 bus: Optional[EventBus] = None):
        self.meal_repository = meal_repository
        self.settings_repository = settings_repository
        self.bus = bus or settings_repository.bus
        self._lock = threading.Lock()
        self._local = threading.local()
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="planner-writer",
                                          initializer=self._mark_writer_thread)
        self._meals: List[Meal] = []
        self._groups: List[str] = normalize_groups([])
        self._selection = SelectionTracker()
        self._purchased: Set[str] = set()
        self._hidden: Set[str] = set()
        self._last_removal: Optional[Tuple[str, bool]] = None
        self._settings = Settings()
        self._pending_settings: List[Dict[str, Any]] = []
        self._gate = PersistenceGate()
        self._started = False

    # --- lifecycle ------------------------------------------------------------
    def start(self) -> "PlannerService":
        """Load settings (and meals when persistence is on) and take over settings writes once."""
        if self._started:
            return self
        settings = self.settings_repository.load()
        if settings.persist_data_between_launches:
            meals, groups = self.meal_repository.load(), self.meal_repository.load_groups()
        else:
            meals, groups = [], normalize_groups([])
        with self._lock:
            self._settings = settings
            self._gate = PersistenceGate.from_settings(settings)
            self._meals = list(meals)
            self._groups = groups
            self._started = True
        self.settings_repository.subscribe(self._on_settings_changed)
        self.settings_repository.set_write_handler(self._write_settings_for_caller)
        logger.info("Planner started with %d meals (persist=%s)", len(meals), settings.persist_data_between_launches)
        return self

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every queued durable write has run."""
        self._writer.submit(lambda: None).result(timeout)

    def close(self) -> None:
        self.settings_repository.remove_write_handler(self._write_settings_for_caller)
        self.settings_repository.unsubscribe(self._on_settings_changed)
        self._writer.shutdown(wait=True)

    # --- reads ----------------------------------------------------------------
    def meals(self, group: Optional[str] = None) -> List[Meal]:
        with self._lock:
            meals = list(self._meals)
        if group:
            meals = [m for m in meals if m.group == group]
        return meals

    def get_meal(self, name: str) -> Optional[Meal]:
        with self._lock:
            return next((m for m in self._meals if m.name == name), None)

    def groups(self) -> List[str]:
        with self._lock:
            return list(self._groups)

    def selected(self) -> List[str]:
        with self._lock:
            return self._selection.names()

    def purchased(self) -> List[str]:
        with self._lock:
            return sorted(self._purchased)

    def settings(self) -> Settings:
        with self._lock:
            return self._settings

    # --- meal list --------------------------------------------------------------
    def add_meal(self, meal: Meal) -> Optional[Future]:
        with self._lock:
            if any(m.name == meal.name for m in self._meals):
                raise DuplicateMealError(meal.name)
            self._meals = self._meals + [meal]
            future = self._persist_meals_locked()
            count = len(self._meals)
        logger.info("Meal added: %s", meal.name)
        publish_meals_changed(self.bus, count)
        return future

    def remove_meal(self, name: str) -> Optional[Future]:
        """Remove the meal and its selection entry in one transition."""
        with self._lock:
            remaining = [m for m in self._meals if m.name != name]
            if len(remaining) == len(self._meals):
                raise MealNotFoundError(name)
            self._meals = remaining
            self._selection.discard(name)
            future = self._persist_meals_locked()
            count = len(self._meals)
            selected = self._selection.names()
        logger.info("Meal removed: %s", name)
        publish_meals_changed(self.bus, count)
        publish_selection_changed(self.bus, selected)
        return future

    def move_meal_to_group(self, name: str, group: str) -> Optional[Future]:
        with self._lock:
            index = next((i for i, m in enumerate(self._meals) if m.name == name), None)
            if index is None:
                raise MealNotFoundError(name)
            updated = list(self._meals)
            updated[index] = updated[index].with_group(group)
            self._meals = updated
            future = self._persist_meals_locked()
            count = len(self._meals)
        publish_meals_changed(self.bus, count)
        return future

    def duplicate_meal_to_group(self, name: str, group: str, new_name: Optional[str] = None) -> Meal:
        """Copy a meal with its ingredients into ``group``.

        Meal names stay unique: without ``new_name`` the copy is called
        "<name> (<group>)", numbered when that is taken as well.
        """
        with self._lock:
            source = next((m for m in self._meals if m.name == name), None)
            if source is None:
                raise MealNotFoundError(name)
            taken = {m.name for m in self._meals}
            if new_name:
                if new_name in taken:
                    raise DuplicateMealError(new_name)
                copy_name = new_name
            else:
                copy_name = f"{name} ({group})"
                counter = 2
                while copy_name in taken:
                    copy_name = f"{name} ({group} {counter})"
                    counter += 1
            copy = Meal(copy_name, source.ingredients, group)
            self._meals = self._meals + [copy]
            self._persist_meals_locked()
            count = len(self._meals)
        logger.info("Meal %s duplicated to %s as %s", name, group, copy_name)
        publish_meals_changed(self.bus, count)
        return copy

    # --- meal groups ------------------------------------------------------------
    def add_group(self, name: str) -> bool:
        normalized = name.strip()
        with self._lock:
            if not normalized or self._has_group_locked(normalized):
                return False
            self._groups = self._groups + [normalized]
            self._persist_meals_locked()
        logger.info("Meal group added: %s", normalized)
        return True

    def rename_group(self, old_name: str, new_name: str) -> bool:
        """Rename a custom group and relabel its meals. Default groups keep their names."""
        if old_name in DEFAULT_MEAL_GROUPS or old_name == UNCATEGORIZED_GROUP:
            return False
        normalized = new_name.strip()
        if not normalized or normalized.lower() == old_name.lower():
            return False
        with self._lock:
            if old_name not in self._groups or self._has_group_locked(normalized):
                return False
            self._groups = [normalized if g == old_name else g for g in self._groups]
            self._meals = [m.with_group(normalized) if m.group == old_name else m for m in self._meals]
            self._persist_meals_locked()
            count = len(self._meals)
        logger.info("Meal group renamed: %s -> %s", old_name, normalized)
        publish_meals_changed(self.bus, count)
        return True

    def remove_group(self, name: str) -> bool:
        """Delete a custom group; its meals move to the uncategorized group."""
        if name in DEFAULT_MEAL_GROUPS or name == UNCATEGORIZED_GROUP:
            return False
        with self._lock:
            if name not in self._groups:
                return False
            self._groups = normalize_groups(g for g in self._groups if g != name)
            self._meals = [m.with_group(UNCATEGORIZED_GROUP) if m.group == name else m for m in self._meals]
            self._persist_meals_locked()
            count = len(self._meals)
        logger.info("Meal group removed: %s", name)
        publish_meals_changed(self.bus, count)
        return True

    # --- selection --------------------------------------------------------------
    def toggle_selection(self, name: str) -> bool:
        with self._lock:
            now_selected = self._selection.toggle(name)
            selected = self._selection.names()
        publish_selection_changed(self.bus, selected)
        return now_selected

    def clear_selection(self) -> None:
        with self._lock:
            self._clear_selection_locked()
        publish_selection_changed(self.bus, [])

    def set_purchased(self, key: str, purchased: bool) -> None:
        with self._lock:
            if purchased:
                self._purchased.add(key)
            else:
                self._purchased.discard(key)

    # --- shopping list ------------------------------------------------------------
    def shopping_list(self) -> List[ShoppingEntry]:
        with self._lock:
            meals, selected, hidden = list(self._meals), self._selection.as_set(), set(self._hidden)
        return [entry for entry in build_shopping_list(meals, selected) if entry.key not in hidden]

    def remove_shopping_ingredient(self, key: str) -> None:
        """Hide one line from the shopping list until the selection is cleared; undoable once."""
        with self._lock:
            was_purchased = key in self._purchased
            self._hidden.add(key)
            self._purchased.discard(key)
            self._last_removal = (key, was_purchased)

    def undo_last_removal(self) -> Optional[str]:
        with self._lock:
            if self._last_removal is None:
                return None
            key, was_purchased = self._last_removal
            self._last_removal = None
            self._hidden.discard(key)
            if was_purchased:
                self._purchased.add(key)
        return key

    def shopping_message(self, share: bool = False) -> str:
        """Plain-text shopping list; with share=True it counts as an export for the clear policy."""
        entries = self.shopping_list()
        message = build_shopping_list_message(entries)
        if share and entries:
            cleared = self._after_export()
            publish_shopping_exported(self.bus, None, len(entries), cleared)
        return message

    def export_shopping_list(self, exporter) -> ExportResult:
        """Hand the current list to ``exporter`` (anything with ``export(entries) -> ExportResult``).

        The exporter runs outside the lock. An empty list is reported as
        nothing to export; exporter errors propagate and leave the selection as is.
        """
        entries = self.shopping_list()
        if not entries:
            return ExportResult(filename=None, items=0)
        result = exporter.export(entries)
        if result.exported:
            result.cleared_selection = self._after_export()
            publish_shopping_exported(self.bus, result.filename, result.items, result.cleared_selection)
        return result

    def _after_export(self) -> bool:
        with self._lock:
            if not self._gate.should_clear_after_export():
                return False
            self._clear_selection_locked()
        publish_selection_changed(self.bus, [])
        return True

    # --- settings -------------------------------------------------------------------
    def update_persist_data_between_launches(self, enabled: bool) -> Future:
        """Switch persistence.

        Enabling queues the current meal list before the flag write, so the
        stored flag never says "enabled" without its data. Disabling wipes
        storage and memory in the same transition.
        """
        return self._change_settings({"persist_data_between_launches": bool(enabled)})

    def update_clear_shopping_after_export(self, enabled: bool) -> Future:
        return self._change_settings({"clear_shopping_after_export": bool(enabled)})

    def update_theme_mode(self, mode: str) -> Future:
        return self._change_settings({"theme_mode": mode})

    def update_accent_palette(self, palette: str) -> Future:
        return self._change_settings({"accent_palette": palette})

    def update_density_mode(self, mode: str) -> Future:
        return self._change_settings({"density_mode": mode})

    def apply_settings(self, settings: Settings) -> PersistenceTransition:
        """Adopt stored settings, keeping changes that are queued but not yet written."""
        with self._lock:
            for changes in self._pending_settings:
                settings = settings.replace(**changes)
            self._settings = settings
            transition = self._gate.apply(settings)
            if transition is not PersistenceTransition.NONE:
                self._reset_if_disabled_locked(transition)
                self._submit_meals_write(self._snapshot_locked())
        self._publish_transition(transition)
        return transition

    def _on_settings_changed(self, event_name: str, settings: Any) -> None:
        if isinstance(settings, Settings):
            self.apply_settings(settings)

    def _change_settings(self, changes: Dict[str, Any]) -> Future:
        with self._lock:
            transition = self._apply_settings_change_locked(changes)
            if transition is not PersistenceTransition.NONE:
                self._submit_meals_write(self._snapshot_locked())
            self._pending_settings.append(changes)
            future = self._writer.submit(self._write_settings, changes)
            future.add_done_callback(lambda f: self._on_write_done(f, "settings"))
        self._publish_transition(transition)
        return future

    def _write_settings(self, changes: Dict[str, Any]) -> Settings:
        with self._lock:
            self._pending_settings.pop(0)
        return self.settings_repository.write(**changes)

    def _write_settings_for_caller(self, changes: Dict[str, Any]) -> Settings:
        """Write handler for ``SettingsRepository``: blocks until the change is stored."""
        if not getattr(self._local, "is_writer", False):
            return self._change_settings(changes).result()
        # called back on the writer itself: apply inline, queued changes still win
        with self._lock:
            queued = {key for pending in self._pending_settings for key in pending}
            transition = self._apply_settings_change_locked(
                {key: value for key, value in changes.items() if key not in queued})
            snapshot = self._snapshot_locked() if transition is not PersistenceTransition.NONE else None
        if snapshot is not None:
            self.meal_repository.save(*snapshot)
        self._publish_transition(transition)
        return self.settings_repository.write(**changes)

    def _publish_transition(self, transition: PersistenceTransition) -> None:
        if transition is PersistenceTransition.DISABLED:
            publish_meals_changed(self.bus, 0)
            publish_selection_changed(self.bus, [])

    # --- internals (call with the lock held) ------------------------------------------
    def _mark_writer_thread(self) -> None:
        self._local.is_writer = True

    def _apply_settings_change_locked(self, changes: Dict[str, Any]) -> PersistenceTransition:
        self._settings = self._settings.replace(**changes)
        self._gate.clear_shopping_after_export = self._settings.clear_shopping_after_export
        if "persist_data_between_launches" not in changes:
            return PersistenceTransition.NONE
        transition = self._gate.transition_to(self._settings.persist_data_between_launches)
        self._reset_if_disabled_locked(transition)
        return transition

    def _reset_if_disabled_locked(self, transition: PersistenceTransition) -> None:
        if transition is PersistenceTransition.DISABLED:
            self._meals = []
            self._groups = normalize_groups([])
            self._clear_selection_locked()

    def _clear_selection_locked(self) -> None:
        self._selection.clear()
        self._purchased.clear()
        self._hidden.clear()
        self._last_removal = None

    def _has_group_locked(self, name: str) -> bool:
        return any(g.lower() == name.lower() for g in self._groups)

    def _snapshot_locked(self) -> Snapshot:
        return list(self._meals), list(self._groups)

    def _persist_meals_locked(self) -> Optional[Future]:
        if not self._gate.should_write_snapshot():
            return None
        return self._submit_meals_write(self._snapshot_locked())

    def _submit_meals_write(self, snapshot: Snapshot) -> Future:
        future = self._writer.submit(self.meal_repository.save, *snapshot)
        future.add_done_callback(lambda f: self._on_write_done(f, "meals"))
        return future

    def _on_write_done(self, future: Future, target: str) -> None:
        error = future.exception()
        if error is not None:
            logger.error("Failed to write %s: %s", target, error)
            publish_storage_write_failed(self.bus, target, error)
