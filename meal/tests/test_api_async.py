import pytest
from httpx import ASGITransport, AsyncClient

from meal.api.api_run import create_app


@pytest.mark.asyncio
async def test_select_and_export_roundtrip(tmp_path):
    app = create_app(tmp_path / "data", tmp_path / "exports")
    meal = {
        "name": "Chili",
        "group": "Dinner",
        "ingredients": [
            {"name": "beans", "amount": 400, "unit": "g"},
            {"name": "Tomato", "amount": 2, "unit": "pc"},
        ],
    }

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            r = await ac.post("/api/meals", json=meal)
            assert r.status_code == 201

            r = await ac.post("/api/selection/toggle", json={"name": "Chili"})
            assert r.json()["selected"] is True

            r = await ac.get("/api/shopping-list")
            assert [i["name"] for i in r.json()["items"]] == ["Beans", "Tomato"]

            r = await ac.post("/api/shopping-list/export")
            data = r.json()
            assert data["status"] == "exported"
            assert (tmp_path / "exports" / data["filename"]).exists()
    finally:
        app.state.planner.close()

    # a new app on the same data dir sees the persisted meal
    reopened = create_app(tmp_path / "data", tmp_path / "exports")
    try:
        assert [m.name for m in reopened.state.planner.meals()] == ["Chili"]
    finally:
        reopened.state.planner.close()
