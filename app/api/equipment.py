from fastapi import APIRouter, Depends

from core.app_context import AppContext
from services.equipment.dto import EquipmentCreateCommand, EquipmentUpdateCommand
from services.equipment.equipment_service import (
    archive_equipment,
    create_equipment,
    delete_equipment_permanently,
    get_equipment_or_raise,
    list_equipment,
    restore_equipment,
    update_equipment,
)

from ..dependencies import get_context
from ..schemas import EquipmentCreate, EquipmentRead, EquipmentUpdate, OrderRead

router = APIRouter(prefix="/equipment", tags=["equipment"])


@router.get("/", response_model=list[EquipmentRead])
def read_equipment_list(include_archived: bool = False, ctx: AppContext = Depends(get_context)):
    return [eq.to_dict() for eq in list_equipment(ctx.equipment, include_archived=include_archived)]


@router.post("/", response_model=EquipmentRead, status_code=201)
def add_equipment(equipment_in: EquipmentCreate, ctx: AppContext = Depends(get_context)):
    command = EquipmentCreateCommand(**equipment_in.model_dump(exclude_none=True))
    return create_equipment(ctx.equipment, command).to_dict()


@router.get("/{equipment_id}", response_model=EquipmentRead)
def read_equipment(equipment_id: str, ctx: AppContext = Depends(get_context)):
    return get_equipment_or_raise(ctx.equipment, equipment_id).to_dict()


@router.get("/{equipment_id}/history", response_model=list[OrderRead])
def read_history(equipment_id: str, ctx: AppContext = Depends(get_context)):
    return [view.to_dict() for view in ctx.order_app_service.history_views(equipment_id)]


@router.put("/{equipment_id}", response_model=EquipmentRead)
def edit_equipment(
    equipment_id: str, equipment_in: EquipmentUpdate, ctx: AppContext = Depends(get_context)
):
    command = EquipmentUpdateCommand(id=equipment_id, **equipment_in.model_dump(exclude_none=True))
    return update_equipment(ctx.equipment, command).to_dict()


@router.post("/{equipment_id}/archive")
def archive(equipment_id: str, ctx: AppContext = Depends(get_context)):
    archive_equipment(ctx.equipment, equipment_id)
    return {"status": "archived"}


@router.post("/{equipment_id}/restore")
def restore(equipment_id: str, ctx: AppContext = Depends(get_context)):
    restore_equipment(ctx.equipment, equipment_id)
    return {"status": "active"}


@router.delete("/{equipment_id}")
def remove_equipment(equipment_id: str, ctx: AppContext = Depends(get_context)):
    delete_equipment_permanently(ctx.equipment, equipment_id)
    return {"status": "deleted"}
