"""End-to-end tests through the HTTP layer."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from machine_manager import create_app
from machine_manager.core.config import AppSettings
from machine_manager.db.session import Database

MOWER = {
    "Name": "Mower A",
    "Model": "X1",
    "SerialNumber": "SN-1",
    "Type": "Mower",
    "Status": "Active",
    "PurchaseDate": "2024-01-01",
    "PurchasePrice": 1000,
}


@pytest.fixture()
def client():
    database = Database("sqlite://")
    app = create_app(AppSettings(DB_URL="sqlite://", SEED_DEMO_DATA=False), database)
    try:
        yield TestClient(app)
    finally:
        database.dispose()


def _usage(machine_id, hours=4.0):
    return {
        "MachineId": machine_id,
        "OperatorName": "A",
        "StartTime": "2024-02-01T08:00",
        "EndTime": "2024-02-01T12:00",
        "HoursUsed": hours,
        "JobDescription": "mow",
    }


def _maintenance(machine_id, performed="2024-01-15"):
    return {
        "MachineId": machine_id,
        "Type": "OilChange",
        "Description": "Regular oil change",
        "PerformedDate": performed,
        "PerformedBy": "John Smith",
        "Cost": 25,
    }


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


def test_request_id_is_echoed(client):
    response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_mower_usage_scenario(client):
    created = client.post("/api/machines", json=MOWER)
    assert created.status_code == 201
    machine = created.json()
    assert machine["OperatingHours"] == 0
    assert machine["SerialNumber"] == "SN-1"
    assert machine["LastMaintenanceDate"] is None

    log = client.post("/api/usage-logs", json=_usage(machine["Id"]))
    assert log.status_code == 201
    assert log.json()["HoursUsed"] == 4.0
    assert client.get(f"/api/machines/{machine['Id']}").json()["OperatingHours"] == 4

    deleted = client.delete(f"/api/usage-logs/{log.json()['Id']}")
    assert deleted.status_code == 204
    assert deleted.content == b""
    assert client.get(f"/api/machines/{machine['Id']}").json()["OperatingHours"] == 0


def test_usage_update_moves_hours(client):
    machine_id = client.post("/api/machines", json=MOWER).json()["Id"]
    log_id = client.post("/api/usage-logs", json=_usage(machine_id, 2.0)).json()["Id"]

    response = client.put(f"/api/usage-logs/{log_id}", json=_usage(machine_id, 5.0))

    assert response.status_code == 200
    assert response.json()["HoursUsed"] == 5.0
    assert client.get(f"/api/machines/{machine_id}").json()["OperatingHours"] == 5


def test_unknown_machine_is_404(client):
    response = client.get("/api/machines/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Machine not found"}

    assert client.get("/api/machines/serial/NOPE").status_code == 404
    assert client.put("/api/machines/999", json=MOWER).status_code == 404
    assert client.delete("/api/machines/999").status_code == 404


def test_maintenance_against_unknown_machine_is_404(client):
    response = client.post("/api/maintenance", json=_maintenance(999))

    assert response.status_code == 404
    assert response.json() == {"error": "Machine not found"}
    assert client.get("/api/maintenance").json() == []


def test_duplicate_serial_is_400(client):
    assert client.post("/api/machines", json=MOWER).status_code == 201

    response = client.post("/api/machines", json={**MOWER, "Name": "Mower B"})

    assert response.status_code == 400
    assert response.json() == {"error": "Serial number already exists"}
    assert len(client.get("/api/machines").json()) == 1


def test_missing_fields_are_400(client):
    payload = {key: value for key, value in MOWER.items() if key not in ("Name", "PurchasePrice")}

    response = client.post("/api/machines", json=payload)

    assert response.status_code == 400
    message = response.json()["error"]
    assert message.startswith("Missing required fields")
    assert "Name" in message
    assert "PurchasePrice" in message


def test_blank_required_field_is_400(client):
    response = client.post("/api/machines", json={**MOWER, "Model": "  "})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: Model"}


def test_machine_detail_and_serial_lookup(client):
    machine_id = client.post("/api/machines", json=MOWER).json()["Id"]
    client.post("/api/maintenance", json=_maintenance(machine_id, "2024-01-15"))
    client.post("/api/maintenance", json=_maintenance(machine_id, "2024-03-01"))
    client.post("/api/usage-logs", json=_usage(machine_id))

    detail = client.get(f"/api/machines/{machine_id}").json()
    assert detail["LastMaintenanceDate"] == "2024-03-01"
    assert [r["PerformedDate"] for r in detail["MaintenanceRecords"]] == ["2024-03-01", "2024-01-15"]
    assert len(detail["UsageLogs"]) == 1
    assert detail["UsageLogs"][0]["MachineId"] == machine_id

    by_serial = client.get("/api/machines/serial/SN-1").json()
    assert by_serial["Id"] == machine_id
    assert "MaintenanceRecords" not in by_serial


def test_ledger_lists_carry_machine_name(client):
    machine_id = client.post("/api/machines", json=MOWER).json()["Id"]
    client.post("/api/maintenance", json=_maintenance(machine_id))
    client.post("/api/usage-logs", json=_usage(machine_id))

    maintenance = client.get("/api/maintenance").json()
    usage = client.get("/api/usage-logs").json()

    assert maintenance[0]["MachineName"] == "Mower A"
    assert maintenance[0]["MachineModel"] == "X1"
    assert usage[0]["MachineName"] == "Mower A"
    assert len(client.get(f"/api/maintenance/machine/{machine_id}").json()) == 1
    assert len(client.get(f"/api/usage-logs/machine/{machine_id}").json()) == 1


def test_maintenance_update_and_delete(client):
    machine_id = client.post("/api/machines", json=MOWER).json()["Id"]
    record_id = client.post("/api/maintenance", json=_maintenance(machine_id)).json()["Id"]

    updated = client.put(f"/api/maintenance/{record_id}", json={**_maintenance(machine_id), "Cost": 40})
    assert updated.status_code == 200
    assert updated.json()["Cost"] == 40
    assert client.get(f"/api/maintenance/{record_id}").json()["Cost"] == 40

    assert client.delete(f"/api/maintenance/{record_id}").status_code == 204
    missing = client.get(f"/api/maintenance/{record_id}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Maintenance record not found"}


def test_delete_machine_cascades(client):
    machine_id = client.post("/api/machines", json=MOWER).json()["Id"]
    client.post("/api/maintenance", json=_maintenance(machine_id))
    client.post("/api/usage-logs", json=_usage(machine_id))

    assert client.delete(f"/api/machines/{machine_id}").status_code == 204

    assert client.get("/api/maintenance").json() == []
    assert client.get("/api/usage-logs").json() == []


def test_snake_case_payloads_are_accepted(client):
    payload = {
        "name": "Blower",
        "model": "B1",
        "serial_number": "SN-9",
        "type": "Blower",
        "status": "Inactive",
        "purchase_date": "2024-04-01",
        "purchase_price": 150.5,
    }
    response = client.post("/api/machines", json=payload)
    assert response.status_code == 201
    assert response.json()["SerialNumber"] == "SN-9"
