from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from decimal import Decimal
from typing import Any, Mapping

ACTIVE = "active"
ARCHIVED = "archived"

EQUIPMENT_TYPES = {
    "flex_endoscope": "Endoscópio Flexível",
    "rigid_endoscope": "Endoscópio Rígido",
    "colonoscope": "Colonoscópio",
    "gastroscope": "Gastroscópio",
    "processor": "Processadora de Imagem",
    "light_source": "Fonte de Luz",
    "other": "Outro",
}

TECHNICAL_STATUSES = {
    "in_use": "Em Uso",
    "in_maintenance": "Em Manutenção",
    "waiting_parts": "Aguardando Peça",
    "ready_for_delivery": "Pronto para Entrega",
}

AVAILABILITY_TYPES = ("internal", "sale", "rent")
SALE_STATUSES = ("available", "sold")
RENTAL_STATUSES = ("available", "rented")

SALE_FIELDS = ("sale_price", "sale_status", "sale_date", "buyer_id")
RENT_FIELDS = (
    "rental_price",
    "rental_status",
    "rental_client_id",
    "rental_start_date",
    "rental_expected_return_date",
    "rental_actual_return_date",
)


@dataclass
class RentalPrice:
    daily: float = 0.0
    weekly: float = 0.0
    monthly: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RentalPrice | None":
        if data is None:
            return None
        return cls(
            daily=float(data.get("daily") or 0),
            weekly=float(data.get("weekly") or 0),
            monthly=float(data.get("monthly") or 0),
        )


@dataclass
class EquipmentDTO:
    id: str
    brand: str
    model: str
    serial_number: str
    owner_id: str
    equipment_type: str
    technical_status: str = "in_use"
    technical_observations: str | None = None
    acquisition_date: date | None = None
    status: str = ACTIVE
    availability_type: str = "internal"

    sale_price: Decimal | None = None
    sale_status: str | None = None
    sale_date: date | None = None
    buyer_id: str | None = None

    rental_price: RentalPrice | None = None
    rental_status: str | None = None
    rental_client_id: str | None = None
    rental_start_date: date | None = None
    rental_expected_return_date: date | None = None
    rental_actual_return_date: date | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "EquipmentDTO":
        known = {f.name for f in fields(cls)}
        data = {key: value for key, value in doc.items() if key in known}
        data["status"] = data.get("status") or ACTIVE
        data["rental_price"] = RentalPrice.from_dict(data.get("rental_price"))
        return cls(**data)

    @property
    def is_archived(self) -> bool:
        return self.status == ARCHIVED

    @property
    def label(self) -> str:
        return f"{self.brand} {self.model}".strip()

    @property
    def type_label(self) -> str:
        return EQUIPMENT_TYPES.get(self.equipment_type, self.equipment_type)

    @property
    def technical_status_label(self) -> str:
        return TECHNICAL_STATUSES.get(self.technical_status, self.technical_status)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EquipmentCreateCommand:
    owner_id: str
    serial_number: str
    brand: str
    model: str
    equipment_type: str
    technical_status: str = "in_use"
    technical_observations: str | None = None
    acquisition_date: date | None = None
    availability_type: str = "internal"
    sale_price: float | None = None
    sale_status: str | None = "available"
    rental_price: dict[str, float] | None = field(default=None)
    rental_status: str | None = "available"

    def to_payload(self) -> dict:
        payload: dict[str, object] = {}
        for key, value in asdict(self).items():
            if value in (None, ""):
                continue
            payload[key] = value
        return payload


@dataclass(frozen=True)
class EquipmentUpdateCommand:
    id: str
    owner_id: str | None = None
    serial_number: str | None = None
    brand: str | None = None
    model: str | None = None
    equipment_type: str | None = None
    technical_status: str | None = None
    technical_observations: str | None = None
    acquisition_date: date | None = None
    availability_type: str | None = None
    sale_price: float | None = None
    sale_status: str | None = None
    sale_date: date | None = None
    buyer_id: str | None = None
    rental_price: dict[str, float] | None = None
    rental_status: str | None = None
    rental_client_id: str | None = None
    rental_start_date: date | None = None
    rental_expected_return_date: date | None = None
    rental_actual_return_date: date | None = None

    def to_payload(self) -> dict:
        return {
            key: value
            for key, value in asdict(self).items()
            if key != "id" and value is not None
        }
