import os
import signal
import sys
from datetime import date
from pathlib import Path

import pytest
from peewee import SqliteDatabase

# Force tests to use in-memory SQLite by default to avoid touching any real DB.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# ensure project root is on sys.path when running tests
sys.path.append(str(Path(__file__).resolve().parent))

from config import Settings
from core.app_context import AppContext
from database.init import database_from_url, init_database
from database.models import Client, Equipment, ServiceOrder
from database.repository import PeeweeRepository
from services.clients.client_service import create_client
from services.clients.dto import ClientCreateCommand
from services.equipment.dto import EquipmentCreateCommand
from services.equipment.equipment_service import create_equipment
from services.orders.dto import OrderCreateCommand
from services.orders.order_service import create_order

_TEST_TIMEOUT = int(os.environ.get("PYTEST_TIMEOUT", "60"))


@pytest.fixture(autouse=True)
def watchdog():
    """Fail a test if it hangs longer than the timeout."""
    if not hasattr(signal, "SIGALRM"):
        yield
        return

    def handler(signum, frame):  # pragma: no cover - timeout handler
        pytest.fail("Test timeout exceeded", pytrace=False)

    signal.signal(signal.SIGALRM, handler)
    signal.alarm(_TEST_TIMEOUT)
    try:
        yield
    finally:
        signal.alarm(0)


@pytest.fixture()
def in_memory_db():
    test_db = SqliteDatabase(":memory:")
    init_database(test_db)
    try:
        yield test_db
    finally:
        test_db.close()


@pytest.fixture()
def clients_repo(in_memory_db):
    return PeeweeRepository(Client)


@pytest.fixture()
def equipment_repo(in_memory_db):
    return PeeweeRepository(Equipment)


@pytest.fixture()
def orders_repo(in_memory_db):
    return PeeweeRepository(ServiceOrder)


@pytest.fixture()
def app_context(clients_repo, equipment_repo, orders_repo):
    settings = Settings(database_url="sqlite:///:memory:")
    return AppContext(
        settings,
        overrides={
            "clients": clients_repo,
            "equipment": equipment_repo,
            "orders": orders_repo,
        },
    )


def client_command(**overrides) -> ClientCreateCommand:
    data = dict(
        client_type="juridica",
        company_name="Hospital Santa Luzia",
        contact_name="Marta Souza",
        cnpj="12.345.678/0001-90",
        phone="(11) 98765-4321",
        email="compras@santaluzia.com.br",
        address="Rua das Flores, 100",
    )
    data.update(overrides)
    return ClientCreateCommand(**data)


def equipment_command(owner_id: str, **overrides) -> EquipmentCreateCommand:
    data = dict(
        owner_id=owner_id,
        serial_number="SN-1001",
        brand="Olympus",
        model="GIF-H190",
        equipment_type="gastroscope",
    )
    data.update(overrides)
    return EquipmentCreateCommand(**data)


@pytest.fixture()
def make_client(clients_repo):
    def factory(**overrides):
        return create_client(clients_repo, client_command(**overrides))

    return factory


@pytest.fixture()
def make_equipment(equipment_repo):
    def factory(owner_id: str, **overrides):
        return create_equipment(equipment_repo, equipment_command(owner_id, **overrides))

    return factory


@pytest.fixture()
def make_order(orders_repo, make_client, make_equipment):
    """Create an order; a client and an equipment are registered when not given."""

    def factory(**overrides):
        if "client_id" not in overrides:
            overrides["client_id"] = make_client().id
        if "equipment_id" not in overrides:
            overrides["equipment_id"] = make_equipment(overrides["client_id"]).id
        data = dict(
            problem_description="Imagem escura",
            entry_date=date(2025, 3, 10),
        )
        data.update(overrides)
        return create_order(orders_repo, OrderCreateCommand(**data))

    return factory


@pytest.fixture()
def api_client(tmp_path):
    from fastapi.testclient import TestClient

    from app.main import create_app

    url = f"sqlite:///{tmp_path / 'service_orders.db'}"
    database = init_database(database_from_url(url))
    context = AppContext(Settings(database_url=url))
    try:
        with TestClient(create_app(context)) as client:
            yield client
    finally:
        database.close()
