import pytest

from services.equipment.dto import EquipmentUpdateCommand
from services.equipment.equipment_service import (
    archive_equipment,
    get_equipment,
    list_equipment,
    list_equipment_by_owner,
    restore_equipment,
    update_equipment,
)
from services.errors import ValidationError


def test_create_defaults(make_client, make_equipment):
    eq = make_equipment(make_client().id)
    assert eq.technical_status == "in_use"
    assert eq.availability_type == "internal"
    assert eq.status == "active"
    assert eq.type_label == "Gastroscópio"
    assert eq.sale_price is None and eq.rental_price is None


def test_required_fields(make_equipment):
    with pytest.raises(ValidationError) as exc:
        make_equipment("", serial_number="", brand="", model="", equipment_type="toaster")
    assert set(exc.value.errors) == {"owner_id", "serial_number", "brand", "model", "equipment_type"}


def test_fields_outside_availability_mode_are_dropped(equipment_repo, make_client, make_equipment):
    eq = make_equipment(
        make_client().id,
        availability_type="rent",
        sale_price=5000,
        rental_price={"daily": 100, "weekly": 500},
    )
    assert eq.sale_price is None
    assert eq.sale_status is None
    assert eq.rental_price.daily == 100
    assert eq.rental_price.monthly == 0

    updated = update_equipment(
        equipment_repo,
        EquipmentUpdateCommand(id=eq.id, availability_type="sale", sale_price=7500),
    )
    assert updated.rental_price is None
    assert updated.rental_status is None
    assert float(updated.sale_price) == 7500


def test_list_by_owner_skips_archived(equipment_repo, make_client, make_equipment):
    owner = make_client()
    other = make_client(company_name="Outro")
    kept = make_equipment(owner.id)
    archived = make_equipment(owner.id, serial_number="SN-2")
    make_equipment(other.id, serial_number="SN-3")
    archive_equipment(equipment_repo, archived.id)
    assert [eq.id for eq in list_equipment_by_owner(equipment_repo, owner.id)] == [kept.id]
    assert list_equipment_by_owner(equipment_repo, "") == []


def test_archive_and_restore(equipment_repo, make_client, make_equipment):
    eq = make_equipment(make_client().id)
    archive_equipment(equipment_repo, eq.id)
    assert list_equipment(equipment_repo) == []
    assert len(list_equipment(equipment_repo, include_archived=True)) == 1
    restore_equipment(equipment_repo, eq.id)
    assert get_equipment(equipment_repo, eq.id).status == "active"
