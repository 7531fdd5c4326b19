import logging

from fastapi import APIRouter, HTTPException, Request, Response

from meal.infra.pdf_utils import generate_pdf_for_shopping_list
from meal.utilities.validators import PurchasedInput, ShoppingKeyInput

router = APIRouter()
logger = logging.getLogger(__name__)


def _list_payload(planner):
    entries = planner.shopping_list()
    purchased = set(planner.purchased())
    items = []
    for entry in entries:
        item = entry.to_dict()
        item["purchased"] = entry.key in purchased
        items.append(item)
    return {"items": items, "total_items": len(items)}


@router.get("/api/shopping-list")
def api_shopping_list(request: Request):
    return _list_payload(request.app.state.planner)


@router.post("/api/shopping-list/purchased")
def api_shopping_list_purchased(request: Request, payload: PurchasedInput):
    planner = request.app.state.planner
    planner.set_purchased(payload.key, payload.purchased)
    return _list_payload(planner)


@router.post("/api/shopping-list/remove")
def api_shopping_list_remove(request: Request, payload: ShoppingKeyInput):
    planner = request.app.state.planner
    planner.remove_shopping_ingredient(payload.key)
    return _list_payload(planner)


@router.post("/api/shopping-list/undo")
def api_shopping_list_undo(request: Request):
    planner = request.app.state.planner
    restored = planner.undo_last_removal()
    return {"restored": restored, **_list_payload(planner)}


@router.get("/api/shopping-list/message")
def api_shopping_list_message(request: Request):
    return {"message": request.app.state.planner.shopping_message()}


@router.post("/api/shopping-list/share")
def api_shopping_list_share(request: Request):
    planner = request.app.state.planner
    message = planner.shopping_message(share=True)
    return {"message": message, "selected": planner.selected()}


@router.post("/api/shopping-list/export")
def api_shopping_list_export(request: Request):
    state = request.app.state
    try:
        result = state.planner.export_shopping_list(state.pdf_exporter)
    except OSError as e:
        logger.error("Shopping list export failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Export failed: {e}")
    return result.to_dict()


@router.get("/api/shopping-list/pdf")
def api_shopping_list_pdf(request: Request):
    entries = request.app.state.planner.shopping_list()
    if not entries:
        raise HTTPException(status_code=404, detail="Shopping list is empty")
    pdf_bytes = generate_pdf_for_shopping_list(entries)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": "attachment; filename=shopping_list.pdf"
        },
    )
