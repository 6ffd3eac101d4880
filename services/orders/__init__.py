"""Service-order submodule: workflow, inspection, budget and numbering."""

from .budget import Budget, BudgetCalculator, BudgetItem
from .dto import OrderCreateCommand, OrderUpdateCommand, OrderView, ServiceOrderDTO
from .inspection import AnnotatorError, InspectionAnnotator, VisualInspection
from .order_app_service import OrderAppService
from .workflow import OrderStatus

__all__ = [
    "AnnotatorError",
    "Budget",
    "BudgetCalculator",
    "BudgetItem",
    "InspectionAnnotator",
    "OrderAppService",
    "OrderCreateCommand",
    "OrderStatus",
    "OrderUpdateCommand",
    "OrderView",
    "ServiceOrderDTO",
    "VisualInspection",
]
