"""Service-order status values.

The status is an open enum: the edit form may move an order from any
selectable status to any other.  ``Arquivada`` is not offered by the
selector and is only reached through the archive operation.
"""

from __future__ import annotations

from enum import Enum


class OrderStatus(str, Enum):
    OPEN = "Aberta"
    DIAGNOSIS = "Em Diagnóstico"
    AWAITING_APPROVAL = "Aguardando Aprovação"
    IN_PROGRESS = "Em Andamento"
    FINISHED = "Finalizada"
    DELIVERED = "Entregue"
    ARCHIVED = "Arquivada"


SELECTABLE_STATUSES: tuple[OrderStatus, ...] = tuple(
    status for status in OrderStatus if status is not OrderStatus.ARCHIVED
)

COMPLETED_STATUSES = frozenset({OrderStatus.FINISHED, OrderStatus.DELIVERED})

RESTORED_STATUS = OrderStatus.OPEN


def parse_status(value: str | OrderStatus) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValueError(f"Status desconhecido: {value!r}") from None


def selectable_status(value: str | OrderStatus) -> OrderStatus:
    """Validate a value coming from the status selector."""
    status = parse_status(value)
    if status is OrderStatus.ARCHIVED:
        raise ValueError("Use a ação de arquivar para arquivar uma OS.")
    return status
