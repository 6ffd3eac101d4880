from typing import Union

from fastapi import APIRouter, Depends, HTTPException

from core.app_context import AppContext
from services.clients.dto import ClientCreateCommand
from services.equipment.dto import EquipmentCreateCommand
from services.orders import order_service
from services.orders.dto import OrderCreateCommand, OrderUpdateCommand

from ..dependencies import get_context
from ..schemas import (
    CircleMarkerSchema,
    GeneralObservations,
    MarkerDraw,
    OrderCreate,
    OrderRead,
    OrderUpdate,
    RectMarkerSchema,
    StatusChange,
    SummaryRead,
)

router = APIRouter(prefix="/orders", tags=["orders"])


def _view(ctx: AppContext, order_id: str) -> dict:
    return ctx.order_app_service.get_view(order_id).to_dict()


@router.get("/", response_model=list[OrderRead])
def read_orders(include_archived: bool = False, ctx: AppContext = Depends(get_context)):
    views = ctx.order_app_service.list_views(include_archived=include_archived)
    return [view.to_dict() for view in views]


@router.post("/", response_model=OrderRead, status_code=201)
def add_order(order_in: OrderCreate, ctx: AppContext = Depends(get_context)):
    data = order_in.model_dump(exclude={"new_client", "new_equipment"}, exclude_none=True)
    data.setdefault("client_id", "")
    data.setdefault("equipment_id", "")
    new_client = (
        ClientCreateCommand(**order_in.new_client.model_dump()) if order_in.new_client else None
    )
    new_equipment = (
        EquipmentCreateCommand(owner_id="", **order_in.new_equipment.model_dump(exclude_none=True))
        if order_in.new_equipment
        else None
    )
    order = ctx.order_app_service.create_order(
        OrderCreateCommand(**data), new_client=new_client, new_equipment=new_equipment
    )
    return _view(ctx, order.id)


@router.get("/{order_id}", response_model=OrderRead)
def read_order(order_id: str, ctx: AppContext = Depends(get_context)):
    return _view(ctx, order_id)


@router.put("/{order_id}", response_model=OrderRead)
def edit_order(order_id: str, order_in: OrderUpdate, ctx: AppContext = Depends(get_context)):
    command = OrderUpdateCommand(id=order_id, **order_in.model_dump(exclude_none=True))
    order_service.update_order(ctx.orders, command)
    return _view(ctx, order_id)


@router.post("/{order_id}/status", response_model=OrderRead)
def change_status(order_id: str, body: StatusChange, ctx: AppContext = Depends(get_context)):
    order_service.change_status(ctx.orders, order_id, body.status)
    return _view(ctx, order_id)


@router.post("/{order_id}/archive")
def archive(order_id: str, ctx: AppContext = Depends(get_context)):
    order_service.archive_order(ctx.orders, order_id)
    return {"status": "Arquivada"}


@router.post("/{order_id}/restore")
def restore(order_id: str, ctx: AppContext = Depends(get_context)):
    order_service.restore_order(ctx.orders, order_id)
    return {"status": "Aberta"}


@router.delete("/{order_id}")
def remove_order(order_id: str, ctx: AppContext = Depends(get_context)):
    order_service.delete_order_permanently(ctx.orders, order_id)
    return {"status": "deleted"}


@router.post(
    "/{order_id}/inspection/markers",
    response_model=Union[RectMarkerSchema, CircleMarkerSchema],
    status_code=201,
)
def add_marker(order_id: str, body: MarkerDraw, ctx: AppContext = Depends(get_context)):
    marker = ctx.order_app_service.add_marker(
        order_id, body.canvas, body.start, body.end, severity=body.type, note=body.note
    )
    return marker.to_dict()


@router.delete("/{order_id}/inspection/markers/{marker_id}")
def remove_marker(order_id: str, marker_id: int, ctx: AppContext = Depends(get_context)):
    if not ctx.order_app_service.remove_marker(order_id, marker_id):
        raise HTTPException(status_code=404, detail="Marker not found")
    return {"status": "deleted"}


@router.put("/{order_id}/inspection/observations", response_model=OrderRead)
def set_observations(
    order_id: str, body: GeneralObservations, ctx: AppContext = Depends(get_context)
):
    ctx.order_app_service.set_general_observations(order_id, body.text)
    return _view(ctx, order_id)


@router.post("/{order_id}/summary", response_model=SummaryRead)
def summarize(order_id: str, ctx: AppContext = Depends(get_context)):
    return {"summary": ctx.order_app_service.summarize(order_id)}
