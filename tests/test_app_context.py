import pytest

from core.app_context import AppContext
from services.orders.order_app_service import OrderAppService


def test_dependencies_are_built_once(app_context):
    service = app_context.order_app_service
    assert isinstance(service, OrderAppService)
    assert app_context.order_app_service is service
    assert service.orders is app_context.orders
    assert service.summary_service is app_context.summary_service


def test_override_replaces_dependency(app_context):
    stub = object()
    overridden = app_context.override(address_gateway=stub)
    assert overridden.address_gateway is stub
    assert overridden.clients is app_context.clients


def test_unknown_override_rejected(app_context):
    with pytest.raises(ValueError):
        AppContext(app_context.settings, overrides={"mailer": object()})
