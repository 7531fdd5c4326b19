import logging

from fastapi import APIRouter, Body, Request

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/data/export")
def export_data(request: Request):
    request.app.state.planner.flush()
    return request.app.state.data_exporter.export_data()


@router.post("/api/data/import")
def import_data(request: Request, payload: dict = Body(...)):
    result = request.app.state.data_importer.import_data(payload)
    return result.to_dict()
