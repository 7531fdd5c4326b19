"""Ingredient catalog repository (file persistence).

Catalog ingredient names are unique case-insensitively. Every ingredient
belongs to a group; the default group "Other" always exists and cannot be
deleted.
"""
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional
from uuid import uuid4

from meal.domain.CatalogIngredient import CatalogIngredient, IngredientGroup
from meal.domain.errors import DuplicateIngredientError
from meal.infra.json_store import atomic_write_json, read_json
from meal.infra.paths import INGREDIENT_CATALOG_FILE
from meal.utilities.constants import DEFAULT_INGREDIENT_GROUP_ID, DEFAULT_INGREDIENT_GROUP_NAME

logger = logging.getLogger(__name__)


class IngredientCatalogRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else INGREDIENT_CATALOG_FILE
        self._lock = Lock()

    # --- storage helpers ----------------------------------------------------
    def _read(self) -> Dict[str, Any]:
        store = read_json(self.path, {})
        if not isinstance(store, dict):
            logger.error("Unexpected catalog document in %s; starting empty", self.path)
            store = {}
        store.setdefault("next_id", 1)
        store.setdefault("groups", [])
        store.setdefault("ingredients", [])
        return store

    def _write(self, store: Dict[str, Any]) -> None:
        atomic_write_json(self.path, store)

    @staticmethod
    def _ensure_default(store: Dict[str, Any]) -> IngredientGroup:
        for g in store["groups"]:
            if g.get("name") == DEFAULT_INGREDIENT_GROUP_NAME:
                return IngredientGroup.from_dict(g)
        group = IngredientGroup(DEFAULT_INGREDIENT_GROUP_ID, DEFAULT_INGREDIENT_GROUP_NAME)
        store["groups"].append(group.to_dict())
        return group

    @staticmethod
    def _find(store: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
        target = name.strip().lower()
        for ing in store["ingredients"]:
            if str(ing.get("name", "")).lower() == target:
                return ing
        return None

    # --- ingredients --------------------------------------------------------
    def list_ingredients(self) -> List[CatalogIngredient]:
        items = [CatalogIngredient.from_dict(i) for i in self._read()["ingredients"]]
        items.sort(key=lambda i: i.name.lower())
        return items

    def find_by_name(self, name: str) -> Optional[CatalogIngredient]:
        found = self._find(self._read(), name)
        return CatalogIngredient.from_dict(found) if found else None

    def insert(self, name: str, unit: str, group_id: Optional[str] = None) -> CatalogIngredient:
        """Insert a new catalog ingredient; raises DuplicateIngredientError when the name exists."""
        normalized_name = name.strip()
        if not normalized_name:
            raise ValueError("Ingredient name cannot be blank")
        with self._lock:
            store = self._read()
            if self._find(store, normalized_name) is not None:
                raise DuplicateIngredientError(normalized_name)
            default = self._ensure_default(store)
            known_groups = {g.get("id") for g in store["groups"]}
            ingredient = CatalogIngredient(
                store["next_id"],
                normalized_name,
                unit.strip(),
                group_id if group_id in known_groups else default.id,
            )
            store["next_id"] += 1
            store["ingredients"].append(ingredient.to_dict())
            self._write(store)
        logger.info("Catalog ingredient added: %s", ingredient.name)
        return ingredient

    def insert_or_ignore(self, name: str, unit: str, group_id: Optional[str] = None) -> Optional[CatalogIngredient]:
        '''Like insert, but returns None for blank or already known names.'''
        if not name or not name.strip():
            return None
        try:
            return self.insert(name, unit, group_id)
        except DuplicateIngredientError:
            return None

    def delete(self, ingredient_id: int) -> bool:
        with self._lock:
            store = self._read()
            before = len(store["ingredients"])
            store["ingredients"] = [i for i in store["ingredients"] if i.get("id") != ingredient_id]
            if len(store["ingredients"]) == before:
                return False
            self._write(store)
        logger.info("Catalog ingredient removed: id=%s", ingredient_id)
        return True

    # --- groups -------------------------------------------------------------
    def list_groups(self) -> List[IngredientGroup]:
        self.ensure_default_group()
        return [IngredientGroup.from_dict(g) for g in self._read()["groups"]]

    def ensure_default_group(self) -> IngredientGroup:
        with self._lock:
            store = self._read()
            known = len(store["groups"])
            group = self._ensure_default(store)
            if len(store["groups"]) != known:
                self._write(store)
        return group

    def create_group(self, name: str) -> bool:
        normalized = (name or "").strip()
        if not normalized:
            return False
        with self._lock:
            store = self._read()
            self._ensure_default(store)
            if any(g.get("name") == normalized for g in store["groups"]):
                return False
            store["groups"].append(IngredientGroup(str(uuid4()), normalized).to_dict())
            self._write(store)
        logger.info("Catalog group created: %s", normalized)
        return True

    def delete_group(self, group_id: str) -> bool:
        """Delete a group, moving its ingredients to the default group."""
        with self._lock:
            store = self._read()
            default = self._ensure_default(store)
            if group_id == default.id:
                return False
            if not any(g.get("id") == group_id for g in store["groups"]):
                return False
            for ing in store["ingredients"]:
                if ing.get("group_id") == group_id:
                    ing["group_id"] = default.id
            store["groups"] = [g for g in store["groups"] if g.get("id") != group_id]
            self._write(store)
        logger.info("Catalog group deleted: %s", group_id)
        return True
