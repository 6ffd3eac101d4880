from fastapi import APIRouter

from .clients import router as clients_router
from .dashboard import router as dashboard_router
from .equipment import router as equipment_router
from .lookup import router as lookup_router
from .orders import router as orders_router

router = APIRouter()
router.include_router(clients_router)
router.include_router(equipment_router)
router.include_router(orders_router)
router.include_router(dashboard_router)
router.include_router(lookup_router)

@router.get("/status")
def status():
    return {"status": "ok"}
