from peewee import OperationalError

from app.main import STORE_UNAVAILABLE
from infrastructure.address_gateway import AddressLookupError, City, State
from services.ai_summary_service import SummaryError

CLIENT = {
    "client_type": "juridica",
    "company_name": "Hospital Santa Luzia",
    "contact_name": "Marta Souza",
    "cnpj": "12.345.678/0001-90",
    "phone": "(11) 98765-4321",
    "email": "compras@santaluzia.com.br",
    "address": "Rua das Flores, 100",
}

EQUIPMENT = {
    "serial_number": "SN-1001",
    "brand": "Olympus",
    "model": "GIF-H190",
    "equipment_type": "gastroscope",
}


def _create_order(client, **extra):
    payload = {
        "problem_description": "Imagem escura",
        "entry_date": "2025-03-05",
        "new_client": CLIENT,
        "new_equipment": EQUIPMENT,
    }
    payload.update(extra)
    response = client.post("/api/orders/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_ping_and_status(api_client):
    assert api_client.get("/ping").json() == {"message": "pong"}
    assert api_client.get("/api/status").json() == {"status": "ok"}


def test_create_and_get_client(api_client):
    response = api_client.post("/api/clients/", json=CLIENT)
    assert response.status_code == 201
    client_id = response.json()["id"]

    data = api_client.get(f"/api/clients/{client_id}").json()
    assert data["company_name"] == "Hospital Santa Luzia"
    assert data["status"] == "active"


def test_client_validation_is_422(api_client):
    response = api_client.post("/api/clients/", json={**CLIENT, "phone": "123"})
    assert response.status_code == 422
    assert "phone" in response.json()["detail"]


def test_client_accepts_raw_digits(api_client):
    raw = {**CLIENT, "phone": "11987654321", "cnpj": "12345678000190"}
    response = api_client.post("/api/clients/", json=raw)
    assert response.status_code == 201, response.text
    data = response.json()
    assert data["phone"] == "(11) 98765-4321"
    assert data["cnpj"] == "12.345.678/0001-90"


class _UnavailableRepository:
    collection = "service_orders"

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise OperationalError("database is locked")

        return fail


def test_store_failure_is_503(api_client):
    context = api_client.app.state.context
    api_client.app.state.context = context.override(orders=_UnavailableRepository())
    response = api_client.get("/api/orders/")
    assert response.status_code == 503
    assert response.json() == {"detail": STORE_UNAVAILABLE}


def test_missing_client_is_404(api_client):
    assert api_client.get("/api/clients/unknown").status_code == 404


def test_client_archive_restore(api_client):
    client_id = api_client.post("/api/clients/", json=CLIENT).json()["id"]
    api_client.post(f"/api/clients/{client_id}/archive")
    assert api_client.get("/api/clients/").json() == []
    assert len(api_client.get("/api/clients/?include_archived=true").json()) == 1
    api_client.post(f"/api/clients/{client_id}/restore")
    assert len(api_client.get("/api/clients/").json()) == 1


def test_equipment_crud(api_client):
    owner = api_client.post("/api/clients/", json=CLIENT).json()["id"]
    response = api_client.post("/api/equipment/", json={**EQUIPMENT, "owner_id": owner})
    assert response.status_code == 201
    eq_id = response.json()["id"]

    updated = api_client.put(f"/api/equipment/{eq_id}", json={"technical_status": "in_maintenance"})
    assert updated.json()["technical_status"] == "in_maintenance"
    assert [e["id"] for e in api_client.get(f"/api/clients/{owner}/equipment").json()] == [eq_id]

    assert api_client.delete(f"/api/equipment/{eq_id}").json() == {"status": "deleted"}
    assert api_client.get(f"/api/equipment/{eq_id}").status_code == 404


def test_order_lifecycle(api_client):
    order = _create_order(api_client)
    assert order["readable_id"] == "OS-202503-0001"
    assert order["client_name"] == "Hospital Santa Luzia"
    assert order["equipment_label"] == "Olympus GIF-H190"
    assert order["budget"]["items"] == []

    order_id = order["id"]
    changed = api_client.post(f"/api/orders/{order_id}/status", json={"status": "Em Diagnóstico"})
    assert changed.json()["status"] == "Em Diagnóstico"

    rejected = api_client.post(f"/api/orders/{order_id}/status", json={"status": "Arquivada"})
    assert rejected.status_code == 422

    api_client.post(f"/api/orders/{order_id}/archive")
    assert api_client.get("/api/orders/").json() == []
    archived = api_client.get("/api/orders/?include_archived=true").json()
    assert archived[0]["status"] == "Arquivada"

    api_client.post(f"/api/orders/{order_id}/restore")
    assert api_client.get(f"/api/orders/{order_id}").json()["status"] == "Aberta"


def test_order_budget_rules(api_client):
    item = {"description": "Limpeza", "quantity": 0, "unit_price": 10}
    response = api_client.post(
        "/api/orders/",
        json={
            "problem_description": "x",
            "entry_date": "2025-03-05",
            "new_client": CLIENT,
            "new_equipment": EQUIPMENT,
            "budget": {"items": [item]},
        },
    )
    assert response.status_code == 422

    order = _create_order(api_client)
    edited = api_client.put(f"/api/orders/{order['id']}", json={"budget": {"items": [item]}})
    assert edited.status_code == 200
    assert edited.json()["budget_total"] == 0
    assert edited.json()["readable_id"] == order["readable_id"]


def test_markers(api_client):
    order_id = _create_order(api_client)["id"]
    url = f"/api/orders/{order_id}/inspection/markers"

    small = api_client.post(url, json={"canvas": "image", "start": [10, 10], "end": [11, 11]})
    assert small.status_code == 422
    assert small.json()["detail"] == {"marker": "Marcação muito pequena"}

    created = api_client.post(
        url, json={"canvas": "lens", "start": [100, 100], "end": [110, 100], "type": "critical"}
    )
    assert created.status_code == 201
    marker = created.json()
    assert marker["shape"] == "circle"
    assert marker["r"] == 10

    order = api_client.get(f"/api/orders/{order_id}").json()
    assert [m["id"] for m in order["visual_inspection"]["markers"]] == [marker["id"]]

    assert api_client.delete(f"{url}/{marker['id']}").status_code == 200
    assert api_client.delete(f"{url}/{marker['id']}").status_code == 404

    api_client.post(f"/api/orders/{order_id}/archive")
    locked = api_client.post(url, json={"canvas": "image", "start": [0, 0], "end": [50, 50]})
    assert locked.status_code == 409


def test_summary_endpoint(api_client):
    order_id = _create_order(api_client, technician_notes="Canal obstruído")["id"]

    class StubSummary:
        def summarize(self, technician_notes, inspection_checklist):
            return f"Resumo: {technician_notes}"

    class FailingSummary:
        def summarize(self, technician_notes, inspection_checklist):
            raise SummaryError("indisponível")

    app = api_client.app
    base = app.state.context
    app.state.context = base.override(summary_service=StubSummary())
    assert api_client.post(f"/api/orders/{order_id}/summary").json() == {"summary": "Resumo: Canal obstruído"}

    app.state.context = base.override(summary_service=FailingSummary())
    assert api_client.post(f"/api/orders/{order_id}/summary").status_code == 502


def test_lookup(api_client):
    class StubGateway:
        def list_states(self):
            return [State(id=35, sigla="SP", nome="São Paulo")]

        def list_cities(self, uf):
            if uf == "XX":
                raise AddressLookupError("falhou")
            return [City(id=1, nome="Campinas")]

    app = api_client.app
    app.state.context = app.state.context.override(address_gateway=StubGateway())
    assert api_client.get("/api/lookup/states").json() == [{"id": 35, "sigla": "SP", "nome": "São Paulo"}]
    assert api_client.get("/api/lookup/states/SP/cities").json() == [{"id": 1, "nome": "Campinas"}]
    assert api_client.get("/api/lookup/states/XX/cities").status_code == 502


def test_dashboard_endpoint(api_client):
    _create_order(api_client)
    stats = api_client.get("/api/dashboard").json()
    assert stats["status_counts"]["Aberta"] == 1
    assert stats["recent_orders"][0]["readable_id"] == "OS-202503-0001"


def test_html_pages(api_client):
    order_id = _create_order(api_client)["id"]
    api_client.post(f"/api/orders/{order_id}/inspection/markers",
                    json={"canvas": "image", "start": [10, 10], "end": [60, 40]})

    assert "OS-202503-0001" in api_client.get("/").text
    assert "OS-202503-0001" in api_client.get("/orders").text
    detail = api_client.get(f"/orders/{order_id}")
    assert detail.status_code == 200
    assert "<rect" in detail.text
    assert "Hospital Santa Luzia" in api_client.get("/clients").text
    assert "GIF-H190" in api_client.get("/equipment").text


def test_html_detail_shows_delivery(api_client):
    order_id = _create_order(
        api_client,
        delivery={"delivery_date": "2025-03-20", "final_observations": "Retirado pela engenharia"},
    )["id"]

    detail = api_client.get(f"/orders/{order_id}").text
    assert "Entrega" in detail
    assert "20/03/2025" in detail
    assert "Retirado pela engenharia" in detail


def test_html_status_form(api_client):
    order_id = _create_order(api_client)["id"]
    response = api_client.post(
        f"/orders/{order_id}/status", data={"status": "Finalizada"}, follow_redirects=False
    )
    assert response.status_code == 303
    assert api_client.get(f"/api/orders/{order_id}").json()["status"] == "Finalizada"
