import logging

from fastapi import APIRouter, HTTPException, Request

from meal.utilities.validators import MealGroupInput

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_group(planner, name: str) -> None:
    if name not in planner.groups():
        raise HTTPException(status_code=404, detail=f"Meal group '{name}' not found")


# === Meal groups ===
@router.get("/api/meal-groups")
def list_groups(request: Request):
    return {"groups": request.app.state.planner.groups()}


@router.post("/api/meal-groups", status_code=201)
def add_group(request: Request, payload: MealGroupInput):
    planner = request.app.state.planner
    if not planner.add_group(payload.name):
        raise HTTPException(status_code=409, detail=f"Meal group '{payload.name}' already exists")
    return {"name": payload.name, "groups": planner.groups()}


@router.put("/api/meal-groups/{name}")
def rename_group(request: Request, name: str, payload: MealGroupInput):
    planner = request.app.state.planner
    _require_group(planner, name)
    if not planner.rename_group(name, payload.name):
        raise HTTPException(status_code=400, detail=f"Meal group '{name}' cannot be renamed to '{payload.name}'")
    return {"name": payload.name, "groups": planner.groups()}


@router.delete("/api/meal-groups/{name}")
def remove_group(request: Request, name: str):
    planner = request.app.state.planner
    _require_group(planner, name)
    if not planner.remove_group(name):
        raise HTTPException(status_code=400, detail=f"Meal group '{name}' is built in")
    return {"status": "deleted", "name": name, "groups": planner.groups()}
