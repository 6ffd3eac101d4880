from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

CLIENT_TYPES = ("fisica", "juridica")
ACTIVE = "active"
ARCHIVED = "archived"


@dataclass
class ClientDTO:
    id: str
    company_name: str
    contact_name: str
    client_type: str = "juridica"
    cpf: str | None = None
    cnpj: str | None = None
    phone: str = ""
    email: str = ""
    address: str = ""
    observations: str | None = None
    status: str = ACTIVE

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ClientDTO":
        known = {f.name for f in fields(cls)}
        data = {key: value for key, value in doc.items() if key in known}
        # documents written before the status field existed count as active
        data["status"] = data.get("status") or ACTIVE
        return cls(**data)

    @property
    def is_archived(self) -> bool:
        return self.status == ARCHIVED

    @property
    def tax_id(self) -> str | None:
        return self.cpf if self.client_type == "fisica" else self.cnpj

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClientCreateCommand:
    company_name: str
    contact_name: str
    phone: str
    email: str
    address: str
    client_type: str = "juridica"
    cpf: str | None = None
    cnpj: str | None = None
    observations: str | None = None
    # optional split address parts; combined into ``address`` when present
    cep: str | None = None
    uf: str | None = None
    city: str | None = None

    def to_payload(self) -> dict:
        payload: dict[str, object] = {}
        for key, value in asdict(self).items():
            if value in (None, ""):
                continue
            payload[key] = value
        return payload


@dataclass(frozen=True)
class ClientUpdateCommand:
    id: str
    company_name: str | None = None
    contact_name: str | None = None
    client_type: str | None = None
    cpf: str | None = None
    cnpj: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    observations: str | None = None

    def to_payload(self) -> dict:
        payload: dict[str, object] = {}
        for key, value in asdict(self).items():
            if key == "id":
                continue
            if value is None:
                continue
            payload[key] = value
        return payload
