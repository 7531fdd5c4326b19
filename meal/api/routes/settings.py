from fastapi import APIRouter, Request

from meal.utilities.validators import SettingsUpdateInput

router = APIRouter()

_UPDATERS = {
    "persist_data_between_launches": "update_persist_data_between_launches",
    "clear_shopping_after_export": "update_clear_shopping_after_export",
    "theme_mode": "update_theme_mode",
    "accent_palette": "update_accent_palette",
    "density_mode": "update_density_mode",
}


@router.get("/api/settings")
def get_settings(request: Request):
    return request.app.state.planner.settings().to_dict()


@router.put("/api/settings")
def update_settings(request: Request, payload: SettingsUpdateInput):
    planner = request.app.state.planner
    for field, value in payload.model_dump(exclude_none=True).items():
        getattr(planner, _UPDATERS[field])(value)
    return planner.settings().to_dict()
