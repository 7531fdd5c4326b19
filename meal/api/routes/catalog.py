from fastapi import APIRouter, HTTPException, Request

from meal.utilities.validators import CatalogGroupInput, CatalogIngredientInput

router = APIRouter(prefix="/api/catalog")


# --- ingredients ---
@router.get("/ingredients")
def list_ingredients(request: Request):
    return {"ingredients": [i.to_dict() for i in request.app.state.catalog.list_ingredients()]}


@router.post("/ingredients", status_code=201)
def add_ingredient(request: Request, payload: CatalogIngredientInput):
    ingredient = request.app.state.catalog.insert(payload.name, payload.unit, payload.group_id)
    return ingredient.to_dict()


@router.delete("/ingredients/{ingredient_id}")
def delete_ingredient(request: Request, ingredient_id: int):
    if not request.app.state.catalog.delete(ingredient_id):
        raise HTTPException(status_code=404, detail="Ingredient not found")
    return {"status": "deleted", "id": ingredient_id}


# --- groups ---
@router.get("/groups")
def list_groups(request: Request):
    return {"groups": [g.to_dict() for g in request.app.state.catalog.list_groups()]}


@router.post("/groups", status_code=201)
def add_group(request: Request, payload: CatalogGroupInput):
    if not request.app.state.catalog.create_group(payload.name):
        raise HTTPException(status_code=409, detail="Group already exists or name is blank")
    return {"status": "created", "name": payload.name.strip()}


@router.delete("/groups/{group_id}")
def delete_group(request: Request, group_id: str):
    if not request.app.state.catalog.delete_group(group_id):
        raise HTTPException(status_code=400, detail="Group cannot be deleted")
    return {"status": "deleted", "id": group_id}
