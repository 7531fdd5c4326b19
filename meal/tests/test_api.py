import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from meal.api.api_run import create_app
from meal.utilities.config import DEBUG

PANCAKES = {
    "name": "Pancakes",
    "group": "Breakfast",
    "ingredients": [
        {"name": " Milk ", "amount": 1, "unit": "L"},
        {"name": "flour", "amount": 200, "unit": "g"},
    ],
}
PORRIDGE = {
    "name": "Porridge",
    "group": "Breakfast",
    "ingredients": [
        {"name": "milk", "amount": 2, "unit": " l "},
        {"name": "oats", "amount": 80, "unit": "g"},
    ],
}


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        self.app = create_app(self.data_dir)
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.state.planner.close()
        self._tmp.cleanup()


class TestMealsApi(ApiTestCase):

    def test_add_list_and_delete(self):
        resp = self.client.post("/api/meals", json=PANCAKES)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["ingredients"][0]["name"], "Milk")

        meals = self.client.get("/api/meals").json()["meals"]
        self.assertEqual([m["name"] for m in meals], ["Pancakes"])
        self.assertEqual(self.client.get("/api/meals", params={"group": "Dinner"}).json()["meals"], [])

        self.assertEqual(self.client.delete("/api/meals/Pancakes").status_code, 200)
        self.assertEqual(self.client.delete("/api/meals/Pancakes").status_code, 404)

    def test_duplicate_meal_conflict(self):
        self.client.post("/api/meals", json=PANCAKES)
        resp = self.client.post("/api/meals", json=PANCAKES)
        self.assertEqual(resp.status_code, 409)
        self.assertIn("already exists", resp.json()["detail"])

    def test_validation_errors(self):
        invalid = [
            {**PANCAKES, "name": "   "},
            {**PANCAKES, "ingredients": []},
            {**PANCAKES, "ingredients": [{"name": "milk", "amount": 0, "unit": "l"}]},
            {**PANCAKES, "ingredients": [{"name": "milk", "amount": 1, "unit": " "}]},
        ]
        for payload in invalid:
            with self.subTest(payload=payload):
                self.assertEqual(self.client.post("/api/meals", json=payload).status_code, 422)

    def test_move_meal_group(self):
        self.client.post("/api/meals", json=PANCAKES)
        resp = self.client.put("/api/meals/Pancakes/group", json={"group": "Dessert"})
        self.assertEqual(resp.status_code, 200)
        meals = self.client.get("/api/meals", params={"group": "Dessert"}).json()["meals"]
        self.assertEqual([m["name"] for m in meals], ["Pancakes"])
        self.assertEqual(self.client.put("/api/meals/Nope/group", json={"group": "Dessert"}).status_code, 404)

    def test_duplicate_meal(self):
        self.client.post("/api/meals", json=PANCAKES)
        resp = self.client.post("/api/meals/Pancakes/duplicate", json={"group": "Dessert"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual((resp.json()["name"], resp.json()["group"]), ("Pancakes (Dessert)", "Dessert"))
        resp = self.client.post("/api/meals/Pancakes/duplicate", json={"group": "Snack", "name": "Pancakes"})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.client.post("/api/meals/Nope/duplicate", json={"group": "Snack"}).status_code, 404)


class TestMealGroupsApi(ApiTestCase):

    def test_add_rename_remove(self):
        self.assertEqual(self.client.post("/api/meal-groups", json={"name": "Brunch"}).status_code, 201)
        self.assertEqual(self.client.post("/api/meal-groups", json={"name": "brunch"}).status_code, 409)
        self.client.post("/api/meals", json={**PANCAKES, "group": "Brunch"})

        resp = self.client.put("/api/meal-groups/Brunch", json={"name": "Late breakfast"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn("Late breakfast", resp.json()["groups"])
        meals = self.client.get("/api/meals", params={"group": "Late breakfast"}).json()
        self.assertEqual([m["name"] for m in meals["meals"]], ["Pancakes"])
        self.assertIn("Late breakfast", meals["groups"])

        self.assertEqual(self.client.delete("/api/meal-groups/Late breakfast").status_code, 200)
        self.assertEqual(self.client.get("/api/meals").json()["meals"][0]["group"], "Uncategorized")

    def test_built_in_and_unknown_groups(self):
        self.assertEqual(self.client.put("/api/meal-groups/Dinner", json={"name": "Supper"}).status_code, 400)
        self.assertEqual(self.client.delete("/api/meal-groups/Uncategorized").status_code, 400)
        self.assertEqual(self.client.delete("/api/meal-groups/Nope").status_code, 404)
        self.assertEqual(self.client.post("/api/meal-groups", json={"name": "  "}).status_code, 422)


class TestShoppingApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.client.post("/api/meals", json=PANCAKES)
        self.client.post("/api/meals", json=PORRIDGE)

    def select(self, *names):
        for name in names:
            self.client.post("/api/selection/toggle", json={"name": name})

    def test_shopping_list_aggregates_selection(self):
        self.assertEqual(self.client.get("/api/shopping-list").json()["items"], [])
        self.select("Pancakes", "Porridge")
        items = self.client.get("/api/shopping-list").json()["items"]
        self.assertEqual([i["name"] for i in items], ["Flour", "Milk", "Oats"])
        milk = items[1]
        self.assertEqual((milk["amount"], milk["unit"], milk["key"]), (3.0, "l", "milk|l"))

    def test_toggle_and_clear_selection(self):
        resp = self.client.post("/api/selection/toggle", json={"name": "Pancakes"})
        self.assertTrue(resp.json()["selected"])
        self.assertEqual(self.client.get("/api/selection").json()["selected"], ["Pancakes"])
        self.client.post("/api/selection/clear")
        self.assertEqual(self.client.get("/api/selection").json()["selected"], [])

    def test_deleting_meal_drops_it_from_selection(self):
        self.select("Pancakes")
        self.client.delete("/api/meals/Pancakes")
        self.assertEqual(self.client.get("/api/selection").json()["selected"], [])

    def test_purchased_marks(self):
        self.select("Pancakes")
        resp = self.client.post("/api/shopping-list/purchased", json={"key": "milk|l", "purchased": True})
        marked = {i["key"]: i["purchased"] for i in resp.json()["items"]}
        self.assertEqual(marked, {"flour|g": False, "milk|l": True})

    def test_remove_line_and_undo(self):
        self.select("Pancakes")
        resp = self.client.post("/api/shopping-list/remove", json={"key": "milk|l"})
        self.assertEqual([i["key"] for i in resp.json()["items"]], ["flour|g"])

        resp = self.client.post("/api/shopping-list/undo")
        self.assertEqual(resp.json()["restored"], "milk|l")
        self.assertEqual(resp.json()["total_items"], 2)
        self.assertIsNone(self.client.post("/api/shopping-list/undo").json()["restored"])

    def test_message(self):
        self.assertEqual(self.client.get("/api/shopping-list/message").json()["message"], "Shopping list is empty")
        self.select("Pancakes")
        message = self.client.get("/api/shopping-list/message").json()["message"]
        self.assertEqual(message, "Shopping list\n• Flour: 200 g\n• Milk: 1 l")

    def test_export_empty_and_non_empty(self):
        self.assertEqual(self.client.post("/api/shopping-list/export").json()["status"], "empty")

        self.select("Pancakes")
        data = self.client.post("/api/shopping-list/export").json()
        self.assertEqual(data["status"], "exported")
        self.assertEqual(data["items"], 2)
        self.assertTrue((self.data_dir / "exports" / data["filename"]).exists())
        self.assertEqual(self.client.get("/api/selection").json()["selected"], ["Pancakes"])

    def test_export_with_clear_policy(self):
        self.client.put("/api/settings", json={"clear_shopping_after_export": True})
        self.select("Pancakes")
        data = self.client.post("/api/shopping-list/export").json()
        self.assertTrue(data["cleared_selection"])
        self.assertEqual(self.client.get("/api/selection").json()["selected"], [])

    def test_share_with_clear_policy(self):
        self.client.put("/api/settings", json={"clear_shopping_after_export": True})
        self.select("Porridge")
        data = self.client.post("/api/shopping-list/share").json()
        self.assertIn("• Oats: 80 g", data["message"])
        self.assertEqual(data["selected"], [])

    def test_pdf_download(self):
        self.assertEqual(self.client.get("/api/shopping-list/pdf").status_code, 404)
        self.select("Porridge")
        resp = self.client.get("/api/shopping-list/pdf")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["content-type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))

    def test_events_recorded(self):
        self.select("Pancakes")
        data = self.client.get("/api/events").json()
        types = [e["type"] for e in data["events"]]
        self.assertIn("planner.meals_changed", types)
        self.assertIn("planner.selection_changed", types)
        newer = self.client.get("/api/events", params={"since": data["next_cursor"]}).json()
        self.assertEqual(newer["events"], [])


class TestSettingsApi(ApiTestCase):

    def test_defaults(self):
        settings = self.client.get("/api/settings").json()
        self.assertTrue(settings["persist_data_between_launches"])
        self.assertEqual(settings["theme_mode"], "SYSTEM")

    def test_update_appearance(self):
        resp = self.client.put("/api/settings", json={"theme_mode": "DARK", "density_mode": "COMPACT"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["theme_mode"], "DARK")
        self.app.state.planner.flush()
        self.assertEqual(self.app.state.planner.settings_repository.load().density_mode, "COMPACT")

    def test_invalid_choice(self):
        self.assertEqual(self.client.put("/api/settings", json={"theme_mode": "NEON"}).status_code, 422)

    def test_disable_persistence_clears_meals(self):
        self.client.post("/api/meals", json=PANCAKES)
        self.client.put("/api/settings", json={"persist_data_between_launches": False})
        self.app.state.planner.flush()
        self.assertEqual(self.client.get("/api/meals").json()["meals"], [])
        self.assertEqual(self.app.state.planner.meal_repository.load(), [])

    def test_direct_repository_write_reaches_planner(self):
        self.client.put("/api/settings", json={"persist_data_between_launches": False})
        self.client.post("/api/meals", json=PANCAKES)
        planner = self.app.state.planner

        planner.settings_repository.set_persist_data_between_launches(True)

        self.assertTrue(self.client.get("/api/settings").json()["persist_data_between_launches"])
        self.assertEqual([m.name for m in planner.meal_repository.load()], ["Pancakes"])


class TestCatalogAndDataApi(ApiTestCase):

    def test_catalog_ingredients(self):
        resp = self.client.post("/api/catalog/ingredients", json={"name": "Milk", "unit": "l"})
        self.assertEqual(resp.status_code, 201)
        ingredient_id = resp.json()["id"]
        self.assertEqual(self.client.post("/api/catalog/ingredients", json={"name": "milk", "unit": "l"}).status_code, 409)
        names = [i["name"] for i in self.client.get("/api/catalog/ingredients").json()["ingredients"]]
        self.assertEqual(names, ["Milk"])
        self.assertEqual(self.client.delete(f"/api/catalog/ingredients/{ingredient_id}").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/catalog/ingredients/{ingredient_id}").status_code, 404)

    def test_catalog_groups(self):
        self.assertEqual(self.client.post("/api/catalog/groups", json={"name": "Dairy"}).status_code, 201)
        self.assertEqual(self.client.post("/api/catalog/groups", json={"name": "Dairy"}).status_code, 409)
        groups = self.client.get("/api/catalog/groups").json()["groups"]
        by_name = {g["name"]: g["id"] for g in groups}
        self.assertEqual(self.client.delete(f"/api/catalog/groups/{by_name['Other']}").status_code, 400)
        self.assertEqual(self.client.delete(f"/api/catalog/groups/{by_name['Dairy']}").status_code, 200)

    def test_export_and_import(self):
        self.client.post("/api/meals", json=PANCAKES)
        exported = self.client.get("/api/data/export").json()
        self.assertEqual([m["name"] for m in exported["meals"]], ["Pancakes"])

        exported["meals"].append({**PORRIDGE, "name": "Porridge"})
        result = self.client.post("/api/data/import", json=exported).json()
        self.assertEqual(result["imported_meals"], 1)
        self.assertEqual(result["skipped_meals"], ["Pancakes"])

    def test_invalid_import(self):
        resp = self.client.post("/api/data/import", json={"meals": "nope"})
        self.assertEqual(resp.status_code, 400)

    def test_import_with_malformed_meal_ingredients(self):
        resp = self.client.post("/api/data/import", json={"meals": [{"name": "X", "ingredients": 5}], "ingredients": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get("/api/meals").json()["meals"], [])

    def test_debug_flag_from_config(self):
        self.assertEqual(self.app.debug, DEBUG)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
