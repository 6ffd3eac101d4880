"""Application service joining orders with their clients and equipment."""

from __future__ import annotations

import logging
from dataclasses import replace

from database.repository import Repository
from services.clients.client_service import create_client, get_client
from services.clients.dto import ClientCreateCommand
from services.equipment.dto import EquipmentCreateCommand
from services.equipment.equipment_service import create_equipment, get_equipment
from services.errors import ValidationError

from . import order_service
from .checklist import checklist_to_text
from .dto import OrderCreateCommand, OrderView, ServiceOrderDTO
from .inspection import InspectionAnnotator, Marker

logger = logging.getLogger(__name__)

MARKER_TOO_SMALL = "Marcação muito pequena"


class OrderAppService:
    """Facade used by the HTTP layer for everything order related."""

    def __init__(
        self,
        orders: Repository,
        clients: Repository,
        equipment: Repository,
        summary_service=None,
    ) -> None:
        self.orders = orders
        self.clients = clients
        self.equipment = equipment
        self.summary_service = summary_service

    # ─────────────────────────── views ───────────────────────────

    def view(self, order: ServiceOrderDTO) -> OrderView:
        """Missing client or equipment records render as blanks."""
        return OrderView(
            order=order,
            client=get_client(self.clients, order.client_id),
            equipment=get_equipment(self.equipment, order.equipment_id),
        )

    def get_view(self, order_id: str) -> OrderView:
        return self.view(order_service.get_order_or_raise(self.orders, order_id))

    def list_views(self, include_archived: bool = False) -> list[OrderView]:
        orders = order_service.list_orders(self.orders, include_archived=include_archived)
        return [self.view(order) for order in orders]

    def history_views(self, equipment_id: str) -> list[OrderView]:
        return [self.view(o) for o in order_service.equipment_history(self.orders, equipment_id)]

    # ─────────────────────────── create ──────────────────────────

    def create_order(
        self,
        command: OrderCreateCommand,
        *,
        new_client: ClientCreateCommand | None = None,
        new_equipment: EquipmentCreateCommand | None = None,
    ) -> ServiceOrderDTO:
        """Create the order, registering its client and equipment first when new."""
        if new_client is not None:
            client = create_client(self.clients, new_client)
            command = replace(command, client_id=client.id)
        if new_equipment is not None:
            if not command.client_id:
                raise ValidationError({"client_id": "Selecione um cliente."})
            equipment = create_equipment(
                self.equipment, replace(new_equipment, owner_id=command.client_id)
            )
            command = replace(command, equipment_id=equipment.id)
        return order_service.create_order(self.orders, command)

    # ─────────────────────────── inspection ──────────────────────

    def _annotator(self, order: ServiceOrderDTO) -> InspectionAnnotator:
        return InspectionAnnotator(order.visual_inspection, read_only=order.is_archived)

    def add_marker(
        self,
        order_id: str,
        canvas: str,
        start: tuple[float, float],
        end: tuple[float, float],
        severity: str = "attention",
        note: str = "",
    ) -> Marker:
        order = order_service.get_order_or_raise(self.orders, order_id)
        annotator = self._annotator(order)
        marker = annotator.draw(canvas, start, end, severity, note)
        if marker is None:
            raise ValidationError({"marker": MARKER_TOO_SMALL})
        order_service.save_visual_inspection(self.orders, order_id, annotator.to_inspection())
        logger.info("➕ Marker %s added to order %s", marker.id, order.readable_id)
        return marker

    def remove_marker(self, order_id: str, marker_id: int) -> bool:
        order = order_service.get_order_or_raise(self.orders, order_id)
        annotator = self._annotator(order)
        if not annotator.remove(marker_id):
            return False
        order_service.save_visual_inspection(self.orders, order_id, annotator.to_inspection())
        logger.info("🗑 Marker %s removed from order %s", marker_id, order.readable_id)
        return True

    def set_general_observations(self, order_id: str, text: str) -> ServiceOrderDTO:
        order = order_service.get_order_or_raise(self.orders, order_id)
        annotator = self._annotator(order)
        annotator.set_general_observations(text)
        return order_service.save_visual_inspection(
            self.orders, order_id, annotator.to_inspection()
        )

    # ─────────────────────────── summary ─────────────────────────

    def summarize(self, order_id: str) -> str:
        order = order_service.get_order_or_raise(self.orders, order_id)
        if self.summary_service is None:
            raise RuntimeError("Summary service is not configured")
        return self.summary_service.summarize(
            technician_notes=order.technician_notes,
            inspection_checklist=checklist_to_text(order.inspection_checklist),
        )
