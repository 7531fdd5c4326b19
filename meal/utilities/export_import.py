"""
Export and Import functionality for meals and the ingredient catalog.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from meal.domain.Meal import Meal
from meal.domain.errors import DuplicateMealError, InvalidImportError
from meal.infra.Ingredient_Catalog_Repository import IngredientCatalogRepository
from meal.infra.Meal_Repository import MealRepository
from meal.utilities.constants import DATA_EXPORT_VERSION

logger = logging.getLogger(__name__)


class ImportResult:
    def __init__(self, imported_meals: int = 0, imported_ingredients: int = 0,
                 skipped_meals: Optional[List[str]] = None, error: Optional[str] = None):
        self.imported_meals = imported_meals
        self.imported_ingredients = imported_ingredients
        self.skipped_meals = skipped_meals or []
        self.error = error

    def to_dict(self):
        return {
            "imported_meals": self.imported_meals,
            "imported_ingredients": self.imported_ingredients,
            "skipped_meals": self.skipped_meals,
            "error": self.error,
        }


class DataExporter:
    """Export meal planner data as a single JSON document."""

    def __init__(self, meal_repository: MealRepository, catalog: IngredientCatalogRepository):
        self.meal_repository = meal_repository
        self.catalog = catalog

    def export_data(self) -> Dict[str, Any]:
        """Build the export payload from what is currently stored."""
        meals = self.meal_repository.load()
        ingredients = self.catalog.list_ingredients()
        groups = self.catalog.list_groups()
        meal_groups = self.meal_repository.load_groups()
        logger.info(f"Exporting {len(meals)} meals and {len(ingredients)} catalog ingredients")
        return {
            "version": DATA_EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(),
            "meals": [m.to_dict() for m in meals],
            "meal_groups": meal_groups,
            "ingredients": [i.to_dict() for i in ingredients],
            "groups": [g.to_dict() for g in groups],
        }

    def export_to_file(self, output_path: Optional[Path] = None) -> Path:
        """Write the export payload to a JSON file."""
        if output_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = Path(f"meal_planner_export_{timestamp}.json")

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(self.export_data(), f, indent=2, ensure_ascii=False)

        logger.info(f"Exported data to {output_path}")
        return Path(output_path)


def _validate_payload(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise InvalidImportError("Import payload must be a JSON object")
    meals = payload.get("meals", [])
    ingredients = payload.get("ingredients", [])
    if not isinstance(meals, list) or not isinstance(ingredients, list):
        raise InvalidImportError("'meals' and 'ingredients' must be lists")
    for meal in meals:
        if not isinstance(meal, dict) or not str(meal.get("name") or "").strip():
            raise InvalidImportError("Every meal needs a non-blank name")
        meal_ingredients = meal.get("ingredients", [])
        if not isinstance(meal_ingredients, list):
            raise InvalidImportError(f"Ingredients of meal '{meal['name']}' must be a list")
        for ing in meal_ingredients:
            _validate_meal_ingredient(meal["name"], ing)
    meal_groups = payload.get("meal_groups") or []
    if not isinstance(meal_groups, list) or not all(isinstance(g, str) for g in meal_groups):
        raise InvalidImportError("'meal_groups' must be a list of names")
    for ing in ingredients:
        if not isinstance(ing, dict):
            raise InvalidImportError("Every ingredient must be an object")
        if not str(ing.get("name") or "").strip() or not str(ing.get("unit") or "").strip():
            raise InvalidImportError("Every ingredient needs a non-blank name and unit")


def _validate_meal_ingredient(meal_name: str, ing: Any) -> None:
    if not isinstance(ing, dict):
        raise InvalidImportError(f"Ingredients of meal '{meal_name}' must be objects")
    if not str(ing.get("name") or "").strip() or not str(ing.get("unit") or "").strip():
        raise InvalidImportError(f"Ingredients of meal '{meal_name}' need a non-blank name and unit")
    amount = ing.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not amount > 0:
        raise InvalidImportError(f"Ingredients of meal '{meal_name}' need a positive amount")


class DataImporter:
    """Merge exported data into the planner and the ingredient catalog.

    Catalog entries with a known name and meals with a taken name are skipped;
    nothing that already exists is replaced.
    """

    def __init__(self, planner, catalog: IngredientCatalogRepository):
        self.planner = planner
        self.catalog = catalog

    def import_data(self, payload: Any) -> ImportResult:
        _validate_payload(payload)

        group_ids = {}
        for group in payload.get("groups", []) or []:
            if isinstance(group, dict) and group.get("name"):
                self.catalog.create_group(str(group["name"]))
        known_groups = {g.name: g.id for g in self.catalog.list_groups()}
        for group in payload.get("groups", []) or []:
            if isinstance(group, dict) and group.get("name") in known_groups:
                group_ids[group.get("id")] = known_groups[group["name"]]

        imported_ingredients = 0
        for ing in payload.get("ingredients", []):
            added = self.catalog.insert_or_ignore(
                str(ing["name"]), str(ing["unit"]), group_ids.get(ing.get("group_id"))
            )
            if added is not None:
                imported_ingredients += 1

        for name in payload.get("meal_groups") or []:
            self.planner.add_group(name)

        imported_meals = 0
        skipped: List[str] = []
        for data in payload.get("meals", []):
            meal = Meal.from_dict({**data, "name": str(data["name"]).strip()})
            try:
                self.planner.add_meal(meal)
                imported_meals += 1
            except DuplicateMealError:
                skipped.append(meal.name)

        logger.info(f"Imported {imported_meals} meals and {imported_ingredients} catalog ingredients "
                    f"(skipped {len(skipped)} meals)")
        return ImportResult(imported_meals, imported_ingredients, skipped)

    def import_from_file(self, input_path: Path) -> ImportResult:
        """Import from a JSON file; unreadable files are reported in ``error``."""
        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Import failed: {e}")
            return ImportResult(error=str(e))
        return self.import_data(payload)
