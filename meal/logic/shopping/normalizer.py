"""Ingredient identity helpers.

Two ingredients are the same shopping item when their trimmed, lowercased
name and unit match. ``str.lower`` does not depend on the process locale,
so the key is stable across machines.
"""
from typing import Tuple

from meal.domain.Ingredient import Ingredient


def _normalize(value: str) -> str:
    return (value or '').strip().lower()


def grouping_key(ingredient: Ingredient) -> Tuple[str, str]:
    return _normalize(ingredient.name), _normalize(ingredient.unit)


def join_storage_key(name: str, unit: str) -> str:
    """Storage form of a grouping key, used for purchase marks and hidden lines."""
    return f"{name}|{unit}"


def storage_key(ingredient: Ingredient) -> str:
    return join_storage_key(*grouping_key(ingredient))


def display_name(key_name: str) -> str:
    """Uppercase only the first character ("olive oil" -> "Olive oil")."""
    if not key_name:
        return key_name
    return key_name[0].upper() + key_name[1:]


__all__ = ['grouping_key', 'join_storage_key', 'storage_key', 'display_name']
