from typing import Optional
import logging

from fastapi import APIRouter, Query, Request

from meal.domain.Ingredient import Ingredient
from meal.domain.Meal import Meal
from meal.utilities.validators import DuplicateMealInput, GroupMoveInput, MealInput, SelectionToggleInput

router = APIRouter()
logger = logging.getLogger(__name__)


# === Meals ===
@router.get("/api/meals")
def list_meals(request: Request, group: Optional[str] = Query(default=None)):
    meals = request.app.state.planner.meals(group)
    return {"meals": [m.to_dict() for m in meals], "groups": request.app.state.planner.groups()}


@router.post("/api/meals", status_code=201)
def add_meal(request: Request, payload: MealInput):
    meal = Meal(
        payload.name,
        [Ingredient(i.name, i.amount, i.unit) for i in payload.ingredients],
        payload.group,
    )
    request.app.state.planner.add_meal(meal)
    return meal.to_dict()


@router.delete("/api/meals/{name}")
def delete_meal(request: Request, name: str):
    request.app.state.planner.remove_meal(name)
    return {"status": "deleted", "name": name}


@router.put("/api/meals/{name}/group")
def move_meal(request: Request, name: str, payload: GroupMoveInput):
    request.app.state.planner.move_meal_to_group(name, payload.group)
    return {"status": "moved", "name": name, "group": payload.group}


@router.post("/api/meals/{name}/duplicate", status_code=201)
def duplicate_meal(request: Request, name: str, payload: DuplicateMealInput):
    copy = request.app.state.planner.duplicate_meal_to_group(name, payload.group, payload.name)
    return copy.to_dict()


# === Selection ===
@router.get("/api/selection")
def get_selection(request: Request):
    return {"selected": request.app.state.planner.selected()}


@router.post("/api/selection/toggle")
def toggle_selection(request: Request, payload: SelectionToggleInput):
    planner = request.app.state.planner
    now_selected = planner.toggle_selection(payload.name)
    return {"name": payload.name, "selected": now_selected, "selection": planner.selected()}


@router.post("/api/selection/clear")
def clear_selection(request: Request):
    request.app.state.planner.clear_selection()
    return {"selected": []}
