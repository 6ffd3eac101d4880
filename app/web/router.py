from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from core.app_context import AppContext
from services.clients.client_service import list_clients
from services.dashboard_service import get_dashboard_stats, status_counts
from services.equipment.equipment_service import list_equipment
from services.orders import order_service
from services.orders.checklist import INSPECTION_ITEMS
from services.orders.inspection import CANVAS_SIZE, InspectionAnnotator
from services.orders.workflow import SELECTABLE_STATUSES
from utils.money import format_brl
from utils.time_utils import format_date

from ..dependencies import get_context

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["brl"] = format_brl
templates.env.filters["date_br"] = format_date


@router.get("/", response_class=HTMLResponse)
def index(request: Request, ctx: AppContext = Depends(get_context)):
    stats = get_dashboard_stats(ctx.orders, ctx.clients, ctx.equipment)
    recent = [ctx.order_app_service.view(order) for order in stats["recent_orders"]]
    return templates.TemplateResponse(
        request, "dashboard.html", {"stats": stats, "recent": recent}
    )


@router.get("/orders", response_class=HTMLResponse)
def orders_page(request: Request, include_archived: bool = False, ctx: AppContext = Depends(get_context)):
    views = ctx.order_app_service.list_views(include_archived=include_archived)
    active = [view.order for view in views if not view.order.is_archived]
    return templates.TemplateResponse(
        request,
        "orders.html",
        {
            "views": views,
            "counts": status_counts(active),
            "include_archived": include_archived,
        },
    )


@router.get("/orders/{order_id}", response_class=HTMLResponse)
def order_detail(request: Request, order_id: str, ctx: AppContext = Depends(get_context)):
    view = ctx.order_app_service.get_view(order_id)
    annotator = InspectionAnnotator(view.order.visual_inspection, read_only=True)
    return templates.TemplateResponse(
        request,
        "order_detail.html",
        {
            "view": view,
            "order": view.order,
            "statuses": [s.value for s in SELECTABLE_STATUSES],
            "checklist_labels": INSPECTION_ITEMS,
            "image_markers": annotator.markers_for("image"),
            "lens_markers": annotator.markers_for("lens"),
            "canvas_size": CANVAS_SIZE,
        },
    )


@router.post("/orders/{order_id}/status")
def post_status(order_id: str, status: str = Form(...), ctx: AppContext = Depends(get_context)):
    order_service.change_status(ctx.orders, order_id, status)
    return RedirectResponse(f"/orders/{order_id}", status_code=303)


@router.post("/orders/{order_id}/archive")
def post_archive(order_id: str, ctx: AppContext = Depends(get_context)):
    order_service.archive_order(ctx.orders, order_id)
    return RedirectResponse("/orders", status_code=303)


@router.post("/orders/{order_id}/restore")
def post_restore(order_id: str, ctx: AppContext = Depends(get_context)):
    order_service.restore_order(ctx.orders, order_id)
    return RedirectResponse(f"/orders/{order_id}", status_code=303)


@router.get("/clients", response_class=HTMLResponse)
def clients_page(request: Request, include_archived: bool = False, ctx: AppContext = Depends(get_context)):
    clients = list_clients(ctx.clients, include_archived=include_archived)
    return templates.TemplateResponse(
        request, "clients.html", {"clients": clients, "include_archived": include_archived}
    )


@router.get("/equipment", response_class=HTMLResponse)
def equipment_page(request: Request, include_archived: bool = False, ctx: AppContext = Depends(get_context)):
    items = list_equipment(ctx.equipment, include_archived=include_archived)
    owners = {c.id: c.company_name for c in list_clients(ctx.clients, include_archived=True)}
    return templates.TemplateResponse(
        request,
        "equipment.html",
        {
            "items": items,
            "owners": owners,
            "include_archived": include_archived,
        },
    )
