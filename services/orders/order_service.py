"""Service module for service orders."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from database.repository import Filter, Repository, RecordNotFoundError
from services.errors import ValidationError
from services.validators import normalize_text
from utils.time_utils import parse_date

from .budget import Budget
from .checklist import normalize_checklist
from .dto import Delivery, Execution, OrderCreateCommand, OrderUpdateCommand, ServiceOrderDTO
from .inspection import VisualInspection
from .readable_id import next_readable_id
from .workflow import RESTORED_STATUS, OrderStatus, selectable_status

logger = logging.getLogger(__name__)

ORDER_ALLOWED_FIELDS = {
    "client_id",
    "equipment_id",
    "problem_description",
    "entry_date",
    "exit_date",
    "status",
    "technician_notes",
    "inspection_checklist",
    "visual_inspection",
    "budget",
    "execution",
    "delivery",
}


def _newest_first(orders: list[ServiceOrderDTO]) -> list[ServiceOrderDTO]:
    return sorted(orders, key=lambda o: o.entry_date or date.min, reverse=True)


# ──────────────────────────── Reads ─────────────────────────────


def list_orders(repo: Repository, include_archived: bool = False) -> list[ServiceOrderDTO]:
    """Orders by entry date, newest first."""
    if include_archived:
        docs = repo.get_all()
    else:
        docs = repo.get_filtered(Filter("status", "!=", OrderStatus.ARCHIVED.value))
    return _newest_first([ServiceOrderDTO.from_document(doc) for doc in docs])


def get_order(repo: Repository, order_id: str) -> ServiceOrderDTO | None:
    doc = repo.get(order_id)
    return ServiceOrderDTO.from_document(doc) if doc else None


def get_order_or_raise(repo: Repository, order_id: str) -> ServiceOrderDTO:
    order = get_order(repo, order_id)
    if order is None:
        raise RecordNotFoundError(repo.collection, order_id)
    return order


def equipment_history(repo: Repository, equipment_id: str) -> list[ServiceOrderDTO]:
    """Every order opened for one equipment, archived ones included."""
    docs = repo.get_filtered(Filter("equipment_id", "==", equipment_id))
    return _newest_first([ServiceOrderDTO.from_document(doc) for doc in docs])


# ──────────────────────────── Validation ─────────────────────────────


def validate_order(data: Mapping[str, Any], *, editing: bool = False) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not data.get("client_id"):
        errors["client_id"] = "Selecione um cliente."
    if not data.get("equipment_id"):
        errors["equipment_id"] = "Selecione um equipamento."
    if not normalize_text(data.get("problem_description")):
        errors["problem_description"] = "A descrição do problema é obrigatória."
    if not data.get("entry_date"):
        errors["entry_date"] = "A data de entrada é obrigatória."
    errors.update(Budget.from_dict(data.get("budget")).validate(editing=editing))
    return errors


def _prepare(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Coerce a payload into storable values; nested records become plain maps."""
    data = {key: value for key, value in payload.items() if key in ORDER_ALLOWED_FIELDS}
    for key in ("entry_date", "exit_date"):
        if key in data:
            data[key] = parse_date(data[key])
    if "status" in data:
        try:
            data["status"] = selectable_status(data["status"]).value
        except ValueError as exc:
            raise ValidationError({"status": str(exc)}) from None
    if "inspection_checklist" in data:
        data["inspection_checklist"] = normalize_checklist(data["inspection_checklist"])
    if "visual_inspection" in data:
        data["visual_inspection"] = VisualInspection.from_dict(data["visual_inspection"]).to_dict()
    if "budget" in data:
        data["budget"] = Budget.from_dict(data["budget"]).to_dict()
    if "execution" in data:
        data["execution"] = Execution.from_dict(data["execution"]).to_dict()
    if "delivery" in data:
        data["delivery"] = Delivery.from_dict(data["delivery"]).to_dict()
    return data


# ──────────────────────────── Writes ─────────────────────────────


def create_order(repo: Repository, command: OrderCreateCommand) -> ServiceOrderDTO:
    """Store a new order and assign its readable number."""
    payload = command.to_payload()
    errors = validate_order(payload)
    if errors:
        logger.warning("❌ Order rejected: %s", sorted(errors))
        raise ValidationError(errors)

    data = _prepare(payload)
    data["problem_description"] = normalize_text(data["problem_description"])
    data.setdefault("budget", Budget().to_dict())
    data.setdefault("visual_inspection", VisualInspection().to_dict())
    data["readable_id"] = next_readable_id(repo, data["entry_date"])
    doc = repo.put(data)
    logger.info("➕ Order %s created (%s)", doc["id"], data["readable_id"])
    return ServiceOrderDTO.from_document(doc)


def update_order(repo: Repository, command: OrderUpdateCommand) -> ServiceOrderDTO:
    """Merge the edit form into the stored order; the readable id is kept."""
    current = get_order_or_raise(repo, command.id)
    updates = {k: v for k, v in command.to_payload().items() if k in ORDER_ALLOWED_FIELDS}
    if not updates:
        return current

    merged = {**current.to_dict(), **updates}
    errors = validate_order(merged, editing=True)
    if errors:
        raise ValidationError(errors)

    data = _prepare(updates)
    logger.info("✏️ Updating order %s: %s", current.readable_id, sorted(updates))
    doc = repo.put(data, command.id, merge=True)
    return ServiceOrderDTO.from_document(doc)


def change_status(repo: Repository, order_id: str, status: str | OrderStatus) -> ServiceOrderDTO:
    """Move an order to any selectable status."""
    try:
        new_status = selectable_status(status)
    except ValueError as exc:
        raise ValidationError({"status": str(exc)}) from None
    doc = repo.patch(order_id, {"status": new_status.value})
    logger.info("🔁 Order %s status → %s", order_id, new_status.value)
    return ServiceOrderDTO.from_document(doc)


def save_visual_inspection(
    repo: Repository, order_id: str, inspection: VisualInspection
) -> ServiceOrderDTO:
    doc = repo.patch(order_id, {"visual_inspection": inspection.to_dict()})
    return ServiceOrderDTO.from_document(doc)


def _require_id(order_id: str, action: str) -> None:
    if not order_id or not str(order_id).strip():
        raise ValueError(f"Invalid ID for {action}")


def archive_order(repo: Repository, order_id: str) -> None:
    _require_id(order_id, "archiving")
    repo.patch(order_id, {"status": OrderStatus.ARCHIVED.value})
    logger.info("📦 Order %s archived", order_id)


def restore_order(repo: Repository, order_id: str) -> None:
    _require_id(order_id, "restoring")
    repo.patch(order_id, {"status": RESTORED_STATUS.value})
    logger.info("✅ Order %s restored", order_id)


def delete_order_permanently(repo: Repository, order_id: str) -> None:
    _require_id(order_id, "permanent deletion")
    repo.delete(order_id)
