"""Persistence gate: decides when the in-memory meal list is mirrored to storage.

Rules:
  - While persistence is enabled every meal-list mutation writes the whole list.
  - Turning persistence off wipes storage and the in-memory list together.
  - Turning persistence on writes the current list before the flag is stored.
  - After a successful export the selection is cleared when the policy asks for it.
"""
from __future__ import annotations

import logging
from enum import Enum

from meal.domain.Settings import Settings

logger = logging.getLogger(__name__)


class PersistenceTransition(Enum):
    NONE = "none"
    ENABLED = "enabled"
    DISABLED = "disabled"


class PersistenceGate:
    def __init__(self, persist_data_between_launches: bool = True, clear_shopping_after_export: bool = False):
        self.persist_data_between_launches = persist_data_between_launches
        self.clear_shopping_after_export = clear_shopping_after_export

    @classmethod
    def from_settings(cls, settings: Settings) -> "PersistenceGate":
        return cls(settings.persist_data_between_launches, settings.clear_shopping_after_export)

    def should_write_snapshot(self) -> bool:
        return self.persist_data_between_launches

    def should_clear_after_export(self) -> bool:
        return self.clear_shopping_after_export

    def transition_to(self, persist_data_between_launches: bool) -> PersistenceTransition:
        '''Records the new persistence flag and reports which transition happened.'''
        previous = self.persist_data_between_launches
        self.persist_data_between_launches = persist_data_between_launches
        if previous == persist_data_between_launches:
            return PersistenceTransition.NONE
        transition = PersistenceTransition.ENABLED if persist_data_between_launches else PersistenceTransition.DISABLED
        logger.info("Persistence %s", transition.value)
        return transition

    def apply(self, settings: Settings) -> PersistenceTransition:
        self.clear_shopping_after_export = settings.clear_shopping_after_export
        return self.transition_to(settings.persist_data_between_launches)

    def __repr__(self) -> str:
        return (f"PersistenceGate(persist={self.persist_data_between_launches}, "
                f"clear_after_export={self.clear_shopping_after_export})")
