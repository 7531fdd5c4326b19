import unittest

from meal.domain.Ingredient import Ingredient
from meal.domain.Meal import Meal
from meal.domain.Settings import Settings
from meal.domain.ShoppingList import ExportResult


class TestIngredient(unittest.TestCase):

    def test_is_immutable(self):
        ingredient = Ingredient("Sugar", 100, "g")
        with self.assertRaises(AttributeError):
            ingredient.amount = 50

    def test_from_dict_accepts_legacy_quantity(self):
        ingredient = Ingredient.from_dict({"name": "Sugar", "quantity": "2.5", "unit": "kg"})
        self.assertEqual(ingredient, Ingredient("Sugar", 2.5, "kg"))

    def test_from_dict_bad_amount_falls_back_to_zero(self):
        self.assertEqual(Ingredient.from_dict({"name": "Salt", "amount": "lots"}).amount, 0.0)


class TestMeal(unittest.TestCase):

    def test_with_group_returns_copy(self):
        meal = Meal("Toast", [Ingredient("bread", 2, "slice")], "Breakfast")
        moved = meal.with_group("Snack")
        self.assertEqual(moved.group, "Snack")
        self.assertEqual(meal.group, "Breakfast")
        self.assertEqual(moved.ingredients, meal.ingredients)

    def test_blank_group_is_uncategorized(self):
        self.assertEqual(Meal("Toast", group="").group, "Uncategorized")
        self.assertEqual(Meal.from_dict({"name": "Toast"}).group, "Uncategorized")

    def test_from_dict(self):
        meal = Meal.from_dict({
            "name": "Porridge",
            "group": "Breakfast",
            "ingredients": [{"name": "oats", "amount": 80, "unit": "g"}],
        })
        self.assertEqual(meal, Meal("Porridge", [Ingredient("oats", 80, "g")], "Breakfast"))


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        settings = Settings.from_dict({})
        self.assertTrue(settings.persist_data_between_launches)
        self.assertFalse(settings.clear_shopping_after_export)
        self.assertEqual(settings.theme_mode, "SYSTEM")

    def test_unknown_enum_values_fall_back(self):
        settings = Settings.from_dict({"theme_mode": "neon", "accent_palette": "ocean"})
        self.assertEqual(settings.theme_mode, "SYSTEM")
        self.assertEqual(settings.accent_palette, "OCEAN")

    def test_replace_leaves_original(self):
        settings = Settings()
        changed = settings.replace(density_mode="COMPACT")
        self.assertEqual(changed.density_mode, "COMPACT")
        self.assertEqual(settings.density_mode, "NORMAL")


class TestExportResult(unittest.TestCase):

    def test_empty_result(self):
        result = ExportResult()
        self.assertFalse(result.exported)
        self.assertEqual(result.to_dict()["status"], "empty")


if __name__ == "__main__":
    unittest.main()
