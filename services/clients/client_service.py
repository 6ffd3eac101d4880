"""Service module for managing clients."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from database.repository import Repository, RecordNotFoundError
from services.errors import ValidationError
from services.validators import (
    compose_address,
    is_valid_cep,
    is_valid_cnpj,
    is_valid_cpf,
    is_valid_email,
    is_valid_phone,
    mask_cep,
    mask_cnpj,
    mask_cpf,
    mask_phone,
    normalize_text,
)

from .dto import ACTIVE, ARCHIVED, CLIENT_TYPES, ClientCreateCommand, ClientDTO, ClientUpdateCommand

logger = logging.getLogger(__name__)

CLIENT_ALLOWED_FIELDS = {
    "client_type",
    "company_name",
    "contact_name",
    "cpf",
    "cnpj",
    "phone",
    "email",
    "address",
    "observations",
}

INPUT_MASKS = {
    "phone": mask_phone,
    "cpf": mask_cpf,
    "cnpj": mask_cnpj,
    "cep": mask_cep,
}


# ──────────────────────────── Reads ─────────────────────────────


def list_clients(repo: Repository, include_archived: bool = False) -> list[ClientDTO]:
    """Clients ordered by name; archived ones only on request."""
    clients = [ClientDTO.from_document(doc) for doc in repo.get_all()]
    if not include_archived:
        clients = [c for c in clients if not c.is_archived]
    return sorted(clients, key=lambda c: c.company_name.casefold())


def get_client(repo: Repository, client_id: str) -> ClientDTO | None:
    doc = repo.get(client_id)
    return ClientDTO.from_document(doc) if doc else None


def get_client_or_raise(repo: Repository, client_id: str) -> ClientDTO:
    client = get_client(repo, client_id)
    if client is None:
        raise RecordNotFoundError(repo.collection, client_id)
    return client


# ──────────────────────────── Validation ─────────────────────────────


def validate_client(data: Mapping[str, Any]) -> dict[str, str]:
    """Return ``{field: message}`` for every invalid field of a full client form."""
    errors: dict[str, str] = {}
    client_type = data.get("client_type")
    if client_type not in CLIENT_TYPES:
        errors["client_type"] = "Selecione o tipo de cliente."
    if not normalize_text(data.get("company_name")):
        errors["company_name"] = "O nome da empresa é obrigatório."
    if not normalize_text(data.get("contact_name")):
        errors["contact_name"] = "O nome do contato é obrigatório."
    if not is_valid_phone(data.get("phone")):
        errors["phone"] = "Telefone inválido."
    if not is_valid_email(data.get("email")):
        errors["email"] = "Por favor, insira um email válido."
    if not normalize_text(data.get("address")):
        errors["address"] = "O endereço é obrigatório."
    if client_type == "fisica" and not is_valid_cpf(data.get("cpf")):
        errors["cpf"] = "O CPF é obrigatório e deve ser válido."
    if client_type == "juridica" and not is_valid_cnpj(data.get("cnpj")):
        errors["cnpj"] = "O CNPJ é obrigatório e deve ser válido."
    return errors


def _apply_masks(payload: dict[str, Any]) -> dict[str, Any]:
    """Format raw digits typed into the masked fields, in place."""
    for key, mask in INPUT_MASKS.items():
        if payload.get(key):
            payload[key] = mask(payload[key])
    return payload


def _address_from_parts(payload: dict[str, Any]) -> dict[str, str]:
    """Fold ``cep``/``uf``/``city`` into ``address``; returns field errors."""
    cep = payload.pop("cep", None)
    uf = payload.pop("uf", None)
    city = payload.pop("city", None)
    if cep is None and uf is None and city is None:
        return {}

    errors: dict[str, str] = {}
    if not is_valid_cep(cep):
        errors["cep"] = "CEP inválido."
    if not uf:
        errors["uf"] = "Selecione um UF."
    if not city:
        errors["city"] = "Selecione uma cidade."
    if not errors and payload.get("address"):
        payload["address"] = compose_address(payload["address"], city, uf, cep)
    return errors


# ──────────────────────────── Writes ─────────────────────────────


def create_client(repo: Repository, command: ClientCreateCommand) -> ClientDTO:
    """Validate and store a new client with status ``active``."""
    payload = _apply_masks(command.to_payload())
    errors = _address_from_parts(payload)
    errors.update(validate_client(payload))
    if errors:
        logger.warning("❌ Client rejected: %s", sorted(errors))
        raise ValidationError(errors)

    data = {key: payload[key] for key in CLIENT_ALLOWED_FIELDS if key in payload}
    data["company_name"] = normalize_text(data["company_name"])
    data["contact_name"] = normalize_text(data["contact_name"])
    data["status"] = ACTIVE
    doc = repo.put(data)
    logger.info("➕ Client %s created (%s)", doc["id"], data["company_name"])
    return ClientDTO.from_document(doc)


def update_client(repo: Repository, command: ClientUpdateCommand) -> ClientDTO:
    """Merge the given fields into the stored client."""
    current = get_client_or_raise(repo, command.id)
    updates = {
        k: v for k, v in _apply_masks(command.to_payload()).items() if k in CLIENT_ALLOWED_FIELDS
    }
    if not updates:
        return current

    merged = {**current.to_dict(), **updates}
    errors = validate_client(merged)
    if errors:
        raise ValidationError(errors)

    logger.info("✏️ Updating client %s: %s", command.id, sorted(updates))
    doc = repo.put(updates, command.id, merge=True)
    return ClientDTO.from_document(doc)


def _require_id(client_id: str, action: str) -> None:
    if not client_id or not str(client_id).strip():
        raise ValueError(f"Invalid ID for {action}")


def archive_client(repo: Repository, client_id: str) -> None:
    _require_id(client_id, "archiving")
    repo.patch(client_id, {"status": ARCHIVED})
    logger.info("📦 Client %s archived", client_id)


def restore_client(repo: Repository, client_id: str) -> None:
    _require_id(client_id, "restoring")
    repo.patch(client_id, {"status": ACTIVE})
    logger.info("✅ Client %s restored", client_id)


def delete_client_permanently(repo: Repository, client_id: str) -> None:
    _require_id(client_id, "permanent deletion")
    repo.delete(client_id)
