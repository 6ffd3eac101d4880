"""Application context: settings plus the dependencies built from them."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from config import Settings, get_settings
from database.models import Client, Equipment, ServiceOrder
from database.repository import PeeweeRepository, Repository
from infrastructure.address_gateway import AddressGateway
from services.ai_summary_service import SummaryService
from services.orders.order_app_service import OrderAppService

DependencyName = str


class AppContext:
    """Holds one instance of every dependency, created on first use."""

    _DEPENDENCY_NAMES: ClassVar[set[str]] = {
        "clients",
        "equipment",
        "orders",
        "address_gateway",
        "summary_service",
        "order_app_service",
    }

    def __init__(
        self,
        settings: Settings,
        *,
        overrides: dict[str, Any] | None = None,
    ) -> None:
        self._settings = settings
        self._overrides: dict[str, Any] = dict(overrides or {})
        unknown = set(self._overrides) - self._DEPENDENCY_NAMES
        if unknown:
            names = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown dependencies to override: {names}")
        self._instances: dict[str, Any] = {}

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def clients(self) -> Repository:
        return self._get_dependency("clients", lambda: PeeweeRepository(Client))

    @property
    def equipment(self) -> Repository:
        return self._get_dependency("equipment", lambda: PeeweeRepository(Equipment))

    @property
    def orders(self) -> Repository:
        return self._get_dependency("orders", lambda: PeeweeRepository(ServiceOrder))

    @property
    def address_gateway(self) -> AddressGateway:
        return self._get_dependency(
            "address_gateway", lambda: AddressGateway(self._settings)
        )

    @property
    def summary_service(self) -> SummaryService:
        return self._get_dependency(
            "summary_service", lambda: SummaryService(self._settings)
        )

    @property
    def order_app_service(self) -> OrderAppService:
        return self._get_dependency(
            "order_app_service",
            lambda: OrderAppService(
                self.orders,
                self.clients,
                self.equipment,
                summary_service=self.summary_service,
            ),
        )

    def override(self, **deps: Any) -> "AppContext":
        """Return a new context with some dependencies replaced."""
        settings = deps.pop("settings", self._settings)
        overrides = dict(self._overrides)
        overrides.update(deps)
        return AppContext(settings, overrides=overrides)

    def _get_dependency(self, name: DependencyName, factory: Callable[[], Any]) -> Any:
        if name in self._overrides:
            return self._overrides[name]
        if name not in self._instances:
            self._instances[name] = factory()
        return self._instances[name]


_app_context: AppContext | None = None


def get_app_context() -> AppContext:
    """Return (creating it on first call) the process-wide context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext(get_settings())
    return _app_context


__all__ = ["AppContext", "get_app_context"]
