from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from config import Settings

logger = logging.getLogger(__name__)


class AddressLookupError(RuntimeError):
    """The IBGE localities service could not be reached or answered badly."""


@dataclass(frozen=True)
class State:
    id: int
    sigla: str
    nome: str


@dataclass(frozen=True)
class City:
    id: int
    nome: str


@dataclass
class AddressGateway:
    """Adapter for the IBGE localities API used by the client form."""

    settings: Settings
    session: requests.Session = field(default_factory=requests.Session, repr=False)

    def _get(self, path: str, **params: Any) -> list[dict[str, Any]]:
        url = f"{self.settings.address_api_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params or None, timeout=self.settings.http_timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Address lookup %s failed: %s", path, exc)
            raise AddressLookupError(f"Falha ao consultar {path}: {exc}") from exc
        if not isinstance(data, list):
            raise AddressLookupError(f"Resposta inesperada para {path}")
        return data

    def list_states(self) -> list[State]:
        """All federative units ordered by name."""
        rows = self._get("estados", orderBy="nome")
        states = [State(id=int(r["id"]), sigla=r["sigla"], nome=r["nome"]) for r in rows]
        return sorted(states, key=lambda s: s.nome)

    def list_cities(self, uf: str) -> list[City]:
        if not uf:
            return []
        rows = self._get(f"estados/{uf.upper()}/municipios")
        return [City(id=int(r["id"]), nome=r["nome"]) for r in rows]
