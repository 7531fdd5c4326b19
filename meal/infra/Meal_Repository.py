import logging
from pathlib import Path
from typing import Iterable, List, Optional

from meal.domain.Meal import Meal
from meal.infra.json_store import atomic_write_json, read_json
from meal.infra.paths import MEALS_FILE
from meal.utilities.constants import DEFAULT_MEAL_GROUPS, UNCATEGORIZED_GROUP

logger = logging.getLogger(__name__)


def normalize_groups(groups: Iterable[str]) -> List[str]:
    """Default groups first, then stored ones, then the fallback group; no duplicates or blanks."""
    merged: List[str] = []
    for name in list(DEFAULT_MEAL_GROUPS) + list(groups) + [UNCATEGORIZED_GROUP]:
        name = str(name).strip()
        if name and name not in merged:
            merged.append(name)
    return merged


class MealRepository:
    """Full-snapshot JSON storage for the meal list and the meal groups.

    ``save`` always rewrites the whole document; there is no partial update.
    Files holding a bare list of meals (the older layout) are still readable.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else MEALS_FILE

    def _read_document(self) -> dict:
        data = read_json(self.path, {})
        if isinstance(data, list):
            return {"meals": data}
        if not isinstance(data, dict):
            logger.error("Unexpected meals document in %s; expected an object", self.path)
            return {}
        return data

    def load(self) -> List[Meal]:
        entries = self._read_document().get("meals", [])
        if not isinstance(entries, list):
            logger.error("Unexpected meals entry in %s; expected a list", self.path)
            return []
        meals = [Meal.from_dict(entry) for entry in entries if isinstance(entry, dict)]
        logger.info("Loaded %d meals from %s", len(meals), self.path)
        return meals

    def load_groups(self) -> List[str]:
        groups = self._read_document().get("groups", [])
        if not isinstance(groups, list):
            groups = []
        return normalize_groups(groups)

    def save(self, meals: Iterable[Meal], groups: Optional[Iterable[str]] = None) -> None:
        payload = {
            "groups": normalize_groups(groups or []),
            "meals": [meal.to_dict() for meal in meals],
        }
        atomic_write_json(self.path, payload)
        logger.info("Saved %d meals to %s", len(payload["meals"]), self.path)
