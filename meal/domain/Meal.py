"""Meal domain entity: a named, grouped, ordered list of ingredients."""
from typing import Iterable, List, Optional

from meal.domain.Ingredient import Ingredient
from meal.utilities.constants import UNCATEGORIZED_GROUP


class Meal:
    """A saved meal.

    Meals are replaced wholesale rather than edited in place, so the
    ingredient sequence is stored as a tuple and ``with_group`` returns a copy.
    """

    def __init__(self, name: str = "", ingredients: Optional[Iterable[Ingredient]] = None,
                 group: str = UNCATEGORIZED_GROUP):
        self.name = name
        self.ingredients = tuple(ingredients) if ingredients else ()
        self.group = group or UNCATEGORIZED_GROUP

    def with_group(self, group: str) -> "Meal":
        return Meal(self.name, self.ingredients, group)

    def __eq__(self, other):
        if not isinstance(other, Meal):
            return NotImplemented
        return (self.name, self.ingredients, self.group) == (other.name, other.ingredients, other.group)

    def __hash__(self):
        return hash((self.name, self.ingredients, self.group))

    def __str__(self) -> str:
        ingredients_str = ", ".join(str(ing) for ing in self.ingredients)
        return f"{self.name} [{self.group}] - {ingredients_str}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        ingredients: List[Ingredient] = [Ingredient.from_dict(ing) for ing in d.get("ingredients", []) or []]
        return Meal(str(d.get("name", "") or ""), ingredients, str(d.get("group", "") or UNCATEGORIZED_GROUP))

    def to_dict(self):
        return {
            "name": self.name,
            "group": self.group,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
        }
