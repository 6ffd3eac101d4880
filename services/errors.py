"""Errors raised by the service layer."""

from __future__ import annotations

from typing import Mapping

from database.repository import RecordNotFoundError

__all__ = ["RecordNotFoundError", "ValidationError"]


class ValidationError(ValueError):
    """Form data rejected; ``errors`` maps field paths to messages."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(summary or "Dados inválidos")
