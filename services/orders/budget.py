"""Budget line items and their running total."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Iterable, Mapping

from utils.money import format_brl, to_decimal

BUDGET_STATUSES = ("Pendente", "Aprovado", "Reprovado")
DEFAULT_BUDGET_STATUS = "Pendente"


@dataclass(frozen=True)
class BudgetItem:
    description: str = ""
    quantity: float = 1
    unit_price: float = 0
    id: int | None = None

    @property
    def subtotal(self) -> Decimal:
        return to_decimal(self.quantity) * to_decimal(self.unit_price)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BudgetItem":
        return cls(
            description=data.get("description") or "",
            quantity=data.get("quantity") if data.get("quantity") is not None else 0,
            unit_price=data.get("unit_price") if data.get("unit_price") is not None else 0,
            id=data.get("id"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }
        if self.id is not None:
            data["id"] = self.id
        return data


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class BudgetCalculator:
    """Ordered list of budget rows with a total derived on every read.

    Rows are replaced, never mutated in place, so a removed row can not
    leave anything behind in the total.
    """

    def __init__(self, items: Iterable[BudgetItem] = ()) -> None:
        self._items: list[BudgetItem] = list(items)

    @property
    def items(self) -> tuple[BudgetItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add_item(self, description: str = "", quantity: float = 1, unit_price: float = 0) -> int:
        """Append a row (blank by default) and return its index."""
        self._items = [*self._items, BudgetItem(description, quantity, unit_price)]
        return len(self._items) - 1

    def update_item(self, index: int, **changes: Any) -> BudgetItem:
        item = replace(self._items[index], **changes)
        self._items = [*self._items[:index], item, *self._items[index + 1 :]]
        return item

    def remove_item(self, index: int) -> None:
        if not -len(self._items) <= index < len(self._items):
            raise IndexError(f"Budget row {index} does not exist")
        self._items = [item for pos, item in enumerate(self._items) if pos != index % len(self._items)]

    @property
    def total(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal("0"))

    @property
    def total_display(self) -> str:
        return format_brl(self.total)

    def validate(self, *, editing: bool = False) -> dict[str, str]:
        """Per-row errors keyed ``items.<index>.<field>``.

        A new order needs quantity > 0; while editing, quantity 0 is allowed.
        """
        errors: dict[str, str] = {}
        for index, item in enumerate(self._items):
            prefix = f"items.{index}"
            if not (item.description or "").strip():
                errors[f"{prefix}.description"] = "Descrição é obrigatória."
            quantity = _number(item.quantity)
            if editing and (quantity is None or quantity < 0):
                errors[f"{prefix}.quantity"] = "Qtd. deve ser >= 0."
            elif not editing and (quantity is None or quantity <= 0):
                errors[f"{prefix}.quantity"] = "Qtd. deve ser > 0."
            price = _number(item.unit_price)
            if price is None or price < 0:
                errors[f"{prefix}.unit_price"] = "Preço deve ser >= 0."
        return errors


@dataclass
class Budget:
    items: list[BudgetItem] = field(default_factory=list)
    payment_method: str = ""
    observations: str = ""
    status: str = DEFAULT_BUDGET_STATUS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Budget":
        """Orders saved without a budget load as an empty one."""
        if not data:
            return cls()
        return cls(
            items=[BudgetItem.from_dict(item) for item in data.get("items") or []],
            payment_method=data.get("payment_method") or "",
            observations=data.get("observations") or "",
            status=data.get("status") or DEFAULT_BUDGET_STATUS,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "payment_method": self.payment_method,
            "observations": self.observations,
            "status": self.status,
        }

    def calculator(self) -> BudgetCalculator:
        return BudgetCalculator(self.items)

    @property
    def total(self) -> Decimal:
        return self.calculator().total

    def validate(self, *, editing: bool = False) -> dict[str, str]:
        errors = {f"budget.{key}": msg for key, msg in self.calculator().validate(editing=editing).items()}
        if self.status not in BUDGET_STATUSES:
            errors["budget.status"] = "Status de orçamento inválido."
        return errors
