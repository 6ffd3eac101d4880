"""Service module for the equipment registry."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from database.repository import Filter, Repository, RecordNotFoundError
from services.errors import ValidationError
from services.validators import normalize_text

from .dto import (
    ACTIVE,
    ARCHIVED,
    AVAILABILITY_TYPES,
    EQUIPMENT_TYPES,
    RENT_FIELDS,
    RENTAL_STATUSES,
    SALE_FIELDS,
    SALE_STATUSES,
    TECHNICAL_STATUSES,
    EquipmentCreateCommand,
    EquipmentDTO,
    EquipmentUpdateCommand,
)

logger = logging.getLogger(__name__)

EQUIPMENT_ALLOWED_FIELDS = {
    "brand",
    "model",
    "serial_number",
    "acquisition_date",
    "owner_id",
    "equipment_type",
    "technical_status",
    "technical_observations",
    "availability_type",
    *SALE_FIELDS,
    *RENT_FIELDS,
}


def list_equipment(repo: Repository, include_archived: bool = False) -> list[EquipmentDTO]:
    items = [EquipmentDTO.from_document(doc) for doc in repo.get_all()]
    if not include_archived:
        items = [eq for eq in items if not eq.is_archived]
    return sorted(items, key=lambda eq: (eq.brand.casefold(), eq.model.casefold()))


def list_equipment_by_owner(repo: Repository, owner_id: str) -> list[EquipmentDTO]:
    """Active equipment of one client, as offered by the order form."""
    if not owner_id:
        return []
    docs = repo.get_filtered(Filter("owner_id", "==", owner_id))
    items = [EquipmentDTO.from_document(doc) for doc in docs]
    return [eq for eq in items if not eq.is_archived]


def get_equipment(repo: Repository, equipment_id: str) -> EquipmentDTO | None:
    doc = repo.get(equipment_id)
    return EquipmentDTO.from_document(doc) if doc else None


def get_equipment_or_raise(repo: Repository, equipment_id: str) -> EquipmentDTO:
    equipment = get_equipment(repo, equipment_id)
    if equipment is None:
        raise RecordNotFoundError(repo.collection, equipment_id)
    return equipment


def validate_equipment(data: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not data.get("owner_id"):
        errors["owner_id"] = "Selecione o cliente proprietário."
    if not normalize_text(data.get("serial_number")):
        errors["serial_number"] = "O nº de série é obrigatório."
    if not normalize_text(data.get("brand")):
        errors["brand"] = "A marca é obrigatória."
    if not normalize_text(data.get("model")):
        errors["model"] = "O modelo é obrigatório."
    if data.get("equipment_type") not in EQUIPMENT_TYPES:
        errors["equipment_type"] = "Selecione o tipo de equipamento."
    if data.get("technical_status", "in_use") not in TECHNICAL_STATUSES:
        errors["technical_status"] = "Selecione o status técnico."

    availability = data.get("availability_type", "internal")
    if availability not in AVAILABILITY_TYPES:
        errors["availability_type"] = "Disponibilidade inválida."
    if availability == "sale":
        price = data.get("sale_price")
        if price is not None and float(price) < 0:
            errors["sale_price"] = "Preço deve ser >= 0."
        if data.get("sale_status") not in (None, *SALE_STATUSES):
            errors["sale_status"] = "Status de venda inválido."
    if availability == "rent":
        for period, value in (data.get("rental_price") or {}).items():
            if value is not None and float(value) < 0:
                errors[f"rental_price.{period}"] = "Preço deve ser >= 0."
        if data.get("rental_status") not in (None, *RENTAL_STATUSES):
            errors["rental_status"] = "Status de aluguel inválido."
    return errors


def _commercial_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Drop the commercial fields that do not belong to the availability mode."""
    availability = data.get("availability_type", "internal")
    keep = {"sale": SALE_FIELDS, "rent": RENT_FIELDS}.get(availability, ())
    for name in (*SALE_FIELDS, *RENT_FIELDS):
        if name not in keep:
            data[name] = None
    if availability == "rent":
        price = data.get("rental_price") or {}
        data["rental_price"] = {
            "daily": float(price.get("daily") or 0),
            "weekly": float(price.get("weekly") or 0),
            "monthly": float(price.get("monthly") or 0),
        }
    return data


def create_equipment(repo: Repository, command: EquipmentCreateCommand) -> EquipmentDTO:
    payload = command.to_payload()
    errors = validate_equipment(payload)
    if errors:
        logger.warning("❌ Equipment rejected: %s", sorted(errors))
        raise ValidationError(errors)

    data = {key: payload.get(key) for key in EQUIPMENT_ALLOWED_FIELDS}
    for key in ("brand", "model", "serial_number"):
        data[key] = normalize_text(data[key])
    data["technical_status"] = data.get("technical_status") or "in_use"
    data["availability_type"] = data.get("availability_type") or "internal"
    data = _commercial_fields(data)
    data["status"] = ACTIVE
    doc = repo.put(data)
    logger.info("➕ Equipment %s created (%s %s)", doc["id"], data["brand"], data["model"])
    return EquipmentDTO.from_document(doc)


def update_equipment(repo: Repository, command: EquipmentUpdateCommand) -> EquipmentDTO:
    current = get_equipment_or_raise(repo, command.id)
    updates = {
        k: v for k, v in command.to_payload().items() if k in EQUIPMENT_ALLOWED_FIELDS
    }
    if not updates:
        return current

    merged = current.to_dict()
    merged.update(updates)
    errors = validate_equipment(merged)
    if errors:
        raise ValidationError(errors)

    data = {key: merged.get(key) for key in EQUIPMENT_ALLOWED_FIELDS}
    data = _commercial_fields(data)
    logger.info("✏️ Updating equipment %s: %s", command.id, sorted(updates))
    doc = repo.put(data, command.id, merge=True)
    return EquipmentDTO.from_document(doc)


def _require_id(equipment_id: str, action: str) -> None:
    if not equipment_id or not str(equipment_id).strip():
        raise ValueError(f"Invalid ID for {action}")


def archive_equipment(repo: Repository, equipment_id: str) -> None:
    _require_id(equipment_id, "archiving")
    repo.patch(equipment_id, {"status": ARCHIVED})
    logger.info("📦 Equipment %s archived", equipment_id)


def restore_equipment(repo: Repository, equipment_id: str) -> None:
    _require_id(equipment_id, "restoring")
    repo.patch(equipment_id, {"status": ACTIVE})
    logger.info("✅ Equipment %s restored", equipment_id)


def delete_equipment_permanently(repo: Repository, equipment_id: str) -> None:
    _require_id(equipment_id, "permanent deletion")
    repo.delete(equipment_id)
