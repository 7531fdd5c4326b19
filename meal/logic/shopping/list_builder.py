"""Shopping list builder.

Provides build_shopping_list(meals, selected) and the plain-text share message.
"""
from collections import defaultdict
from typing import AbstractSet, Dict, Iterable, List, Tuple

from meal.domain.Meal import Meal
from meal.domain.ShoppingList import ShoppingEntry
from meal.logic.shopping.normalizer import display_name, grouping_key, join_storage_key
from meal.utilities.constants import SHOPPING_LIST_EMPTY_MESSAGE, SHOPPING_LIST_TITLE


def build_shopping_list(meals: Iterable[Meal], selected: AbstractSet[str]) -> List[ShoppingEntry]:
    """Aggregate the ingredients of the selected meals.

    Args:
        meals: saved meals.
        selected: names of the meals to include; names without a meal are ignored.

    Returns:
        One entry per (name, unit) grouping key with the amounts summed,
        sorted by the capitalized name.
    """
    if not selected:
        return []

    totals: Dict[Tuple[str, str], float] = defaultdict(float)
    for meal in meals:
        if meal.name not in selected:
            continue
        for ing in meal.ingredients:
            totals[grouping_key(ing)] += ing.amount

    shopping_list = [
        ShoppingEntry(display_name(name), amount, unit, key=join_storage_key(name, unit))
        for (name, unit), amount in totals.items()
    ]
    shopping_list.sort(key=lambda entry: entry.name)
    return shopping_list


def format_amount(value: float) -> str:
    """Print whole amounts without a decimal part (3.0 -> "3")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def build_shopping_list_message(entries: Iterable[ShoppingEntry]) -> str:
    entries = list(entries)
    if not entries:
        return SHOPPING_LIST_EMPTY_MESSAGE
    lines = [f"• {e.name}: {format_amount(e.amount)} {e.unit}".rstrip() for e in entries]
    return "\n".join([SHOPPING_LIST_TITLE] + lines)


__all__ = ['build_shopping_list', 'build_shopping_list_message', 'format_amount']
