"""Inspection checklist: a fixed set of items scored OK / Defeito / Troca."""

from __future__ import annotations

from typing import Any, Mapping

from services.errors import ValidationError

INSPECTION_ITEMS = {
    "command": "Comando/Mecânica",
    "tubes": "Tubos e Canais",
    "buttons": "Botões e Lentes",
    "image": "Imagem",
    "setup": "Setup/Conexões",
    "lighting": "Iluminação",
    "accessories": "Acessórios",
}

CHECKLIST_STATUSES = ("OK", "Defeito", "Troca")

Checklist = dict[str, dict[str, str]]


def normalize_checklist(raw: Mapping[str, Any] | None) -> Checklist:
    """Validate item keys and statuses; a missing observation becomes ``""``.

    Items set to ``None`` are treated as not scored and dropped.
    """
    if not raw:
        return {}

    errors: dict[str, str] = {}
    checklist: Checklist = {}
    for key, item in raw.items():
        if key not in INSPECTION_ITEMS:
            errors[f"inspection_checklist.{key}"] = "Item de inspeção desconhecido."
            continue
        if item is None:
            continue
        status = item.get("status")
        if status not in CHECKLIST_STATUSES:
            errors[f"inspection_checklist.{key}.status"] = "Status inválido."
            continue
        observation = item.get("observation")
        checklist[key] = {
            "status": status,
            "observation": "" if observation is None else str(observation),
        }
    if errors:
        raise ValidationError(errors)
    return checklist


def checklist_to_text(checklist: Mapping[str, Mapping[str, str]] | None) -> str:
    """Plain-text rendering, one line per scored item in the fixed order."""
    lines = []
    for key, label in INSPECTION_ITEMS.items():
        item = (checklist or {}).get(key)
        if not item:
            continue
        line = f"{label}: {item.get('status')}"
        if item.get("observation"):
            line += f" ({item['observation']})"
        lines.append(line)
    return "\n".join(lines)
