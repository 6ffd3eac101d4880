from datetime import date

import pytest

from services.errors import RecordNotFoundError, ValidationError
from services.orders import order_service
from services.orders.dto import OrderCreateCommand, OrderUpdateCommand


def test_new_order_defaults(make_order):
    order = make_order()
    assert order.status == "Aberta"
    assert order.budget.items == []
    assert order.visual_inspection.markers == []
    assert order.entry_date == date(2025, 3, 10)


def test_create_requires_fields(orders_repo):
    command = OrderCreateCommand(
        client_id="", equipment_id="", problem_description=" ", entry_date=date(2025, 1, 1)
    )
    with pytest.raises(ValidationError) as exc:
        order_service.create_order(orders_repo, command)
    assert set(exc.value.errors) == {"client_id", "equipment_id", "problem_description"}


def test_create_rejects_zero_quantity(make_order):
    with pytest.raises(ValidationError) as exc:
        make_order(budget={"items": [{"description": "Peça", "quantity": 0, "unit_price": 10}]})
    assert "budget.items.0.quantity" in exc.value.errors


def test_checklist_observation_normalised_on_save(orders_repo, make_order):
    order = make_order(
        inspection_checklist={
            "command": {"status": "OK"},
            "image": {"status": "Defeito", "observation": "Manchas"},
        }
    )
    reloaded = order_service.get_order(orders_repo, order.id)
    assert reloaded.inspection_checklist == {
        "command": {"status": "OK", "observation": ""},
        "image": {"status": "Defeito", "observation": "Manchas"},
    }


def test_unknown_checklist_item_rejected(make_order):
    with pytest.raises(ValidationError):
        make_order(inspection_checklist={"battery": {"status": "OK"}})


def test_archive_hides_from_default_listing(orders_repo, make_order):
    kept = make_order()
    archived = make_order()
    order_service.archive_order(orders_repo, archived.id)

    listed = [o.id for o in order_service.list_orders(orders_repo)]
    assert listed == [kept.id]

    everything = {o.id: o for o in order_service.list_orders(orders_repo, include_archived=True)}
    assert everything[archived.id].status == "Arquivada"


def test_restore_sets_open(orders_repo, make_order):
    order = make_order(status="Finalizada")
    order_service.archive_order(orders_repo, order.id)
    order_service.restore_order(orders_repo, order.id)
    assert order_service.get_order(orders_repo, order.id).status == "Aberta"


def test_listing_is_newest_first(orders_repo, make_order):
    make_order(entry_date=date(2025, 1, 5))
    make_order(entry_date=date(2025, 3, 1))
    make_order(entry_date=date(2025, 2, 1))
    dates = [o.entry_date for o in order_service.list_orders(orders_repo)]
    assert dates == sorted(dates, reverse=True)


def test_update_keeps_readable_id(orders_repo, make_order):
    order = make_order()
    updated = order_service.update_order(
        orders_repo,
        OrderUpdateCommand(
            id=order.id,
            entry_date=date(2025, 7, 1),
            technician_notes="Canal obstruído",
            budget={"items": [{"description": "Limpeza", "quantity": 0, "unit_price": 30}]},
        ),
    )
    assert updated.readable_id == order.readable_id
    assert updated.technician_notes == "Canal obstruído"
    assert updated.budget.items[0].quantity == 0


def test_any_selectable_status_may_follow_any_other(orders_repo, make_order):
    order = make_order()
    for status in ("Entregue", "Aberta", "Aguardando Aprovação", "Em Diagnóstico"):
        assert order_service.change_status(orders_repo, order.id, status).status == status


def test_status_selector_rejects_archive(orders_repo, make_order):
    order = make_order()
    with pytest.raises(ValidationError):
        order_service.change_status(orders_repo, order.id, "Arquivada")
    with pytest.raises(ValidationError):
        order_service.update_order(orders_repo, OrderUpdateCommand(id=order.id, status="Arquivada"))


def test_delete_permanently(orders_repo, make_order):
    order = make_order()
    order_service.delete_order_permanently(orders_repo, order.id)
    assert order_service.get_order(orders_repo, order.id) is None
    with pytest.raises(RecordNotFoundError):
        order_service.get_order_or_raise(orders_repo, order.id)


def test_equipment_history(orders_repo, make_client, make_equipment, make_order):
    client = make_client()
    eq = make_equipment(client.id)
    first = make_order(client_id=client.id, equipment_id=eq.id, entry_date=date(2025, 1, 2))
    second = make_order(client_id=client.id, equipment_id=eq.id, entry_date=date(2025, 5, 2))
    make_order()
    order_service.archive_order(orders_repo, first.id)
    history = order_service.equipment_history(orders_repo, eq.id)
    assert [o.id for o in history] == [second.id, first.id]


def test_execution_dates_are_stored(orders_repo, make_order):
    order = make_order(
        execution={"technician": "Ana", "procedures": "Troca", "completion_date": date(2025, 3, 20)}
    )
    reloaded = order_service.get_order(orders_repo, order.id)
    assert reloaded.execution.technician == "Ana"
    assert reloaded.execution.completion_date == date(2025, 3, 20)
