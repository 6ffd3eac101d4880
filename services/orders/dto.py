from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from decimal import Decimal
from typing import Any, Mapping

from services.clients.dto import ClientDTO
from services.equipment.dto import EquipmentDTO
from utils.money import format_brl
from utils.time_utils import parse_date

from .budget import Budget
from .inspection import VisualInspection
from .workflow import OrderStatus


@dataclass
class Execution:
    technician: str = ""
    procedures: str = ""
    completion_date: date | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Execution":
        data = data or {}
        return cls(
            technician=data.get("technician") or "",
            procedures=data.get("procedures") or "",
            completion_date=parse_date(data.get("completion_date")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "technician": self.technician,
            "procedures": self.procedures,
            "completion_date": self.completion_date.isoformat() if self.completion_date else None,
        }


@dataclass
class Delivery:
    delivery_date: date | None = None
    final_observations: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Delivery":
        data = data or {}
        return cls(
            delivery_date=parse_date(data.get("delivery_date")),
            final_observations=data.get("final_observations") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "final_observations": self.final_observations,
        }


@dataclass
class ServiceOrderDTO:
    id: str
    readable_id: str
    entry_date: date
    problem_description: str
    status: str
    client_id: str
    equipment_id: str
    exit_date: date | None = None
    technician_notes: str = ""
    inspection_checklist: dict[str, dict[str, str]] = field(default_factory=dict)
    visual_inspection: VisualInspection = field(default_factory=VisualInspection)
    budget: Budget = field(default_factory=Budget)
    execution: Execution = field(default_factory=Execution)
    delivery: Delivery = field(default_factory=Delivery)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ServiceOrderDTO":
        return cls(
            id=doc["id"],
            readable_id=doc.get("readable_id") or "",
            entry_date=parse_date(doc.get("entry_date")),
            exit_date=parse_date(doc.get("exit_date")),
            problem_description=doc.get("problem_description") or "",
            status=doc.get("status") or OrderStatus.OPEN.value,
            client_id=doc.get("client_id") or "",
            equipment_id=doc.get("equipment_id") or "",
            technician_notes=doc.get("technician_notes") or "",
            inspection_checklist=dict(doc.get("inspection_checklist") or {}),
            visual_inspection=VisualInspection.from_dict(doc.get("visual_inspection")),
            budget=Budget.from_dict(doc.get("budget")),
            execution=Execution.from_dict(doc.get("execution")),
            delivery=Delivery.from_dict(doc.get("delivery")),
        )

    @property
    def is_archived(self) -> bool:
        return self.status == OrderStatus.ARCHIVED.value

    @property
    def budget_total(self) -> Decimal:
        return self.budget.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "readable_id": self.readable_id,
            "entry_date": self.entry_date,
            "exit_date": self.exit_date,
            "problem_description": self.problem_description,
            "status": self.status,
            "client_id": self.client_id,
            "equipment_id": self.equipment_id,
            "technician_notes": self.technician_notes,
            "inspection_checklist": self.inspection_checklist,
            "visual_inspection": self.visual_inspection.to_dict(),
            "budget": self.budget.to_dict(),
            "execution": self.execution.to_dict(),
            "delivery": self.delivery.to_dict(),
        }


@dataclass(frozen=True)
class OrderCreateCommand:
    client_id: str
    equipment_id: str
    problem_description: str
    entry_date: date
    status: str = OrderStatus.OPEN.value
    exit_date: date | None = None
    technician_notes: str = ""
    inspection_checklist: dict | None = None
    visual_inspection: dict | None = None
    budget: dict | None = None
    execution: dict | None = None
    delivery: dict | None = None

    def to_payload(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class OrderUpdateCommand:
    id: str
    client_id: str | None = None
    equipment_id: str | None = None
    problem_description: str | None = None
    entry_date: date | None = None
    exit_date: date | None = None
    status: str | None = None
    technician_notes: str | None = None
    inspection_checklist: dict | None = None
    visual_inspection: dict | None = None
    budget: dict | None = None
    execution: dict | None = None
    delivery: dict | None = None

    def to_payload(self) -> dict:
        payload: dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "id" or value is None:
                continue
            payload[f.name] = value
        return payload


@dataclass
class OrderView:
    """Order joined with its client and equipment for display."""

    order: ServiceOrderDTO
    client: ClientDTO | None = None
    equipment: EquipmentDTO | None = None

    @property
    def client_name(self) -> str:
        return self.client.company_name if self.client else ""

    @property
    def equipment_label(self) -> str:
        return self.equipment.label if self.equipment else ""

    @property
    def serial_number(self) -> str:
        return self.equipment.serial_number if self.equipment else ""

    @property
    def budget_total_display(self) -> str:
        return format_brl(self.order.budget_total)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.order.to_dict(),
            "client_name": self.client_name,
            "equipment_label": self.equipment_label,
            "serial_number": self.serial_number,
            "budget_total": self.order.budget_total,
        }
