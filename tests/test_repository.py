from datetime import date

import pytest

from database.repository import Filter, RecordNotFoundError, deep_merge


def test_put_without_id_assigns_one(orders_repo):
    doc = orders_repo.put({"readable_id": "OS-1", "entry_date": date(2025, 1, 1),
                           "problem_description": "x", "client_id": "c", "equipment_id": "e"})
    assert len(doc["id"]) == 32
    assert orders_repo.get(doc["id"])["entry_date"] == date(2025, 1, 1)


def test_merge_put_merges_nested_maps(orders_repo):
    doc = orders_repo.put({
        "readable_id": "OS-1", "entry_date": date(2025, 1, 1), "problem_description": "x",
        "client_id": "c", "equipment_id": "e",
        "budget": {"items": [{"description": "a"}], "status": "Pendente"},
    })
    merged = orders_repo.put({"budget": {"status": "Aprovado"}}, doc["id"], merge=True)
    assert merged["budget"] == {"items": [{"description": "a"}], "status": "Aprovado"}
    assert merged["readable_id"] == "OS-1"


def test_put_without_merge_replaces(clients_repo):
    doc = clients_repo.put({"company_name": "A", "contact_name": "B", "phone": "p",
                            "email": "e", "address": "x", "observations": "old"})
    replaced = clients_repo.put({"company_name": "C", "contact_name": "D", "phone": "p",
                                 "email": "e", "address": "y"}, doc["id"])
    assert replaced["id"] == doc["id"]
    assert replaced["observations"] is None


def test_patch_missing_raises(orders_repo):
    with pytest.raises(RecordNotFoundError):
        orders_repo.patch("missing", {"status": "Aberta"})


def test_unknown_field_rejected(clients_repo):
    with pytest.raises(ValueError):
        clients_repo.put({"nickname": "x"})


def test_filters(equipment_repo):
    for serial, owner in (("1", "a"), ("2", "a"), ("3", "b")):
        equipment_repo.put({"brand": "B", "model": "M", "serial_number": serial,
                            "owner_id": owner, "equipment_type": "other"})
    found = equipment_repo.get_filtered(Filter("owner_id", "==", "a"), Filter("serial_number", "!=", "1"))
    assert [d["serial_number"] for d in found] == ["2"]
    assert len(equipment_repo.get_filtered(Filter("serial_number", "in", ["1", "3"]))) == 2
    with pytest.raises(ValueError):
        Filter("owner_id", "~", "a")


def test_delete_missing_is_quiet(clients_repo):
    clients_repo.delete("missing")


def test_deep_merge_replaces_lists():
    assert deep_merge({"a": {"b": 1, "c": [1]}}, {"a": {"c": [2]}}) == {"a": {"b": 1, "c": [2]}}
