from fastapi import APIRouter, Depends

from core.app_context import AppContext
from services.clients.client_service import (
    archive_client,
    create_client,
    delete_client_permanently,
    get_client_or_raise,
    list_clients,
    restore_client,
    update_client,
)
from services.clients.dto import ClientCreateCommand, ClientUpdateCommand
from services.equipment.equipment_service import list_equipment_by_owner

from ..dependencies import get_context
from ..schemas import ClientCreate, ClientRead, ClientUpdate, EquipmentRead

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=list[ClientRead])
def read_clients(include_archived: bool = False, ctx: AppContext = Depends(get_context)):
    return [c.to_dict() for c in list_clients(ctx.clients, include_archived=include_archived)]


@router.post("/", response_model=ClientRead, status_code=201)
def add_client(client_in: ClientCreate, ctx: AppContext = Depends(get_context)):
    client = create_client(ctx.clients, ClientCreateCommand(**client_in.model_dump()))
    return client.to_dict()


@router.get("/{client_id}", response_model=ClientRead)
def read_client(client_id: str, ctx: AppContext = Depends(get_context)):
    return get_client_or_raise(ctx.clients, client_id).to_dict()


@router.get("/{client_id}/equipment", response_model=list[EquipmentRead])
def read_client_equipment(client_id: str, ctx: AppContext = Depends(get_context)):
    return [eq.to_dict() for eq in list_equipment_by_owner(ctx.equipment, client_id)]


@router.put("/{client_id}", response_model=ClientRead)
def edit_client(client_id: str, client_in: ClientUpdate, ctx: AppContext = Depends(get_context)):
    command = ClientUpdateCommand(id=client_id, **client_in.model_dump(exclude_none=True))
    return update_client(ctx.clients, command).to_dict()


@router.post("/{client_id}/archive")
def archive(client_id: str, ctx: AppContext = Depends(get_context)):
    archive_client(ctx.clients, client_id)
    return {"status": "archived"}


@router.post("/{client_id}/restore")
def restore(client_id: str, ctx: AppContext = Depends(get_context)):
    restore_client(ctx.clients, client_id)
    return {"status": "active"}


@router.delete("/{client_id}")
def remove_client(client_id: str, ctx: AppContext = Depends(get_context)):
    delete_client_permanently(ctx.clients, client_id)
    return {"status": "deleted"}
