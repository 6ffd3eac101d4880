from fastapi import APIRouter, Depends

from core.app_context import AppContext
from services.dashboard_service import get_dashboard_stats

from ..dependencies import get_context

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard")
def read_dashboard(ctx: AppContext = Depends(get_context)):
    stats = get_dashboard_stats(ctx.orders, ctx.clients, ctx.equipment)
    stats["recent_orders"] = [
        {
            "id": order.id,
            "readable_id": order.readable_id,
            "status": order.status,
            "entry_date": order.entry_date,
        }
        for order in stats["recent_orders"]
    ]
    return stats
