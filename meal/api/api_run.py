from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from meal.domain.errors import (
    DuplicateIngredientError,
    DuplicateMealError,
    InvalidImportError,
    MealNotFoundError,
)
from meal.events.Event_Bus import EventBus
from meal.events.web_observers import EventLog
from meal.infra import paths
from meal.infra.Ingredient_Catalog_Repository import IngredientCatalogRepository
from meal.infra.Meal_Repository import MealRepository
from meal.infra.Settings_Repository import SettingsRepository
from meal.infra.pdf_utils import ShoppingListPdfExporter
from meal.logic.planner.service import PlannerService
from meal.utilities.config import DEBUG
from meal.utilities.export_import import DataExporter, DataImporter

# Routers
from meal.api.routes import catalog, data, groups, meals, settings, shopping

# Logging
logger = logging.getLogger("meal_app")

ERROR_STATUS = {
    DuplicateMealError: 409,
    MealNotFoundError: 404,
    DuplicateIngredientError: 409,
    InvalidImportError: 400,
}


def build_planner(data_dir: Optional[Path] = None, bus: Optional[EventBus] = None) -> PlannerService:
    """Wire repositories for ``data_dir`` (default: configured data dir) into a started PlannerService."""
    data_dir = Path(data_dir) if data_dir is not None else paths.DATA_DIR
    bus = bus or EventBus()
    planner = PlannerService(
        MealRepository(data_dir / paths.MEALS_FILE.name),
        SettingsRepository(data_dir / paths.SETTINGS_FILE.name, bus),
        bus,
    )
    return planner.start()


def create_app(data_dir: Optional[Path] = None, export_dir: Optional[Path] = None) -> FastAPI:
    if data_dir is not None and export_dir is None:
        export_dir = Path(data_dir) / "exports"
    data_dir = Path(data_dir) if data_dir is not None else paths.DATA_DIR
    bus = EventBus()

    event_log = EventLog()
    event_log.start(bus)
    planner = build_planner(data_dir, bus)
    catalog_repo = IngredientCatalogRepository(data_dir / paths.INGREDIENT_CATALOG_FILE.name)
    catalog_repo.ensure_default_group()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        planner.close()
        logger.info("Planner writer stopped")

    # Initialize FastAPI app
    app = FastAPI(title="Meal Planner Shopping API", debug=DEBUG, lifespan=lifespan)
    app.state.planner = planner
    app.state.catalog = catalog_repo
    app.state.event_log = event_log
    app.state.pdf_exporter = ShoppingListPdfExporter(export_dir)
    app.state.data_exporter = DataExporter(planner.meal_repository, catalog_repo)
    app.state.data_importer = DataImporter(planner, catalog_repo)

    # Include routers
    app.include_router(meals.router)
    app.include_router(groups.router)
    app.include_router(shopping.router)
    app.include_router(settings.router)
    app.include_router(catalog.router)
    app.include_router(data.router)

    for error_type, status_code in ERROR_STATUS.items():
        app.add_exception_handler(error_type, _error_handler(status_code))

    @app.get("/api/events")
    def api_events(since: Optional[int] = Query(default=None, ge=0)):
        """Recent planner events; poll with since=<next_cursor> for newer ones."""
        return event_log.get_events(since)

    @app.get("/health")
    def health():
        return {"status": "ok", "meals": len(planner.meals())}

    logger.info("Meal planner API ready (data dir: %s)", data_dir)
    return app


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler
