"""End-to-end tests for the HTTP surface against an in-memory SQLite audit log."""

import threading
from decimal import Decimal

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from parking_engine.database import Base, engine as db_engine
from parking_engine.main import app
from parking_engine.models.alert import Alert  # noqa
from parking_engine.models.gate_event import GateEvent  # noqa
from parking_engine.services.allocation_engine import AllocationEngine
from parking_engine.services.spot_pool import SpotClass, SpotPool
from parking_engine.services.ticket_store import TicketStore


@pytest.fixture
def client():
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)
    with TestClient(app) as c:
        pool = SpotPool.from_counts({SpotClass.BIKE_SPOT: 1, SpotClass.CAR_SPOT: 1})
        app.state.engine = AllocationEngine(pool, TicketStore(), Decimal("10.00"))
        yield c


def enter(client, vehicle_class="FOUR_WHEEL", plate="X"):
    return client.post("/api/v1/parking/entry", json={"vehicle_class": vehicle_class, "license_plate": plate})


def exit_lot(client, ticket_id):
    return client.post("/api/v1/parking/exit", json={"ticket_id": ticket_id})


class TestGateEndpoints:
    def test_entry_returns_ticket(self, client):
        resp = enter(client)
        assert resp.status_code == 200
        body = resp.json()
        assert body["spot_id"] == "S-C-1"
        assert body["license_plate"] == "X"
        assert body["ticket_id"]
        assert body["entry_time"]

    def test_unknown_class_is_400(self, client):
        resp = enter(client, vehicle_class="SPACESHIP")
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidInputError"

    def test_full_lot_scenario(self, client):
        t1 = enter(client, plate="X").json()
        full = enter(client, plate="Y")
        assert full.status_code == 409
        assert full.json()["error"] == "CapacityExceededError"

        receipt = exit_lot(client, t1["ticket_id"])
        assert receipt.status_code == 200
        assert enter(client, plate="Y").status_code == 200

    def test_exit_returns_receipt(self, client):
        t1 = enter(client).json()
        body = exit_lot(client, t1["ticket_id"]).json()
        assert body["settled"] is True
        assert Decimal(str(body["fee"])) == Decimal("10.00")
        assert body["settled_at"]

    def test_unknown_ticket_is_404(self, client):
        resp = exit_lot(client, "unknown-id")
        assert resp.status_code == 404
        assert resp.json()["error"] == "InvalidTicketError"
        assert client.get("/api/v1/parking/tickets/unknown-id").status_code == 404

    def test_double_exit_is_409(self, client):
        t1 = enter(client).json()
        exit_lot(client, t1["ticket_id"])
        resp = exit_lot(client, t1["ticket_id"])
        assert resp.status_code == 409
        assert resp.json()["error"] == "AlreadySettledError"

    def test_open_tickets_listing(self, client):
        t1 = enter(client).json()
        enter(client, vehicle_class="BIKE", plate="B")
        exit_lot(client, t1["ticket_id"])
        open_tickets = client.get("/api/v1/parking/tickets").json()
        assert [t["license_plate"] for t in open_tickets] == ["B"]


class TestSpotEndpoints:
    def test_spots_listing_and_filter(self, client):
        enter(client)
        spots = client.get("/api/v1/spots").json()
        assert [s["spot_id"] for s in spots] == ["S-B-1", "S-C-1"]
        occupied = client.get("/api/v1/spots", params={"occupied": True}).json()
        assert [s["license_plate"] for s in occupied] == ["X"]
        cars = client.get("/api/v1/spots", params={"spot_class": "CAR_SPOT"}).json()
        assert len(cars) == 1

    def test_unknown_spot_class_filter(self, client):
        assert client.get("/api/v1/spots", params={"spot_class": "BOAT"}).status_code == 400

    def test_availability(self, client):
        enter(client)
        avail = client.get("/api/v1/spots/availability").json()
        assert avail["CAR_SPOT"] == {"total": 1, "free": 0, "occupied": 1, "is_full": True}
        assert avail["BIKE_SPOT"]["free"] == 1
        assert avail["LARGE_SPOT"]["total"] == 0


class TestAuditEndpoints:
    def test_gate_events_logged(self, client):
        t1 = enter(client).json()
        exit_lot(client, t1["ticket_id"])
        events = client.get("/api/v1/gate-events").json()
        assert sorted(e["gate"] for e in events) == ["entry", "exit"]
        exit_row = next(e for e in events if e["gate"] == "exit")
        assert Decimal(str(exit_row["fee"])) == Decimal("10.00")

    def test_daily_stats(self, client):
        t1 = enter(client).json()
        exit_lot(client, t1["ticket_id"])
        stats = client.get("/api/v1/stats/daily").json()
        assert stats["entries"] == 1
        assert stats["exits"] == 1
        assert Decimal(str(stats["revenue"])) == Decimal("10.00")

    def test_capacity_alert_raised_when_full_and_cleared_on_exit(self, client):
        enter(client)
        alerts = client.get("/api/v1/alerts", params={"alert_type": "capacity_full"}).json()
        assert len(alerts) == 1
        assert alerts[0]["spot_class"] == "CAR_SPOT"

        exit_lot(client, client.get("/api/v1/parking/tickets").json()[0]["ticket_id"])
        assert client.get("/api/v1/alerts", params={"is_resolved": 0}).json() == []
        enter(client, plate="Y")
        alerts = client.get("/api/v1/alerts", params={"is_resolved": 0}).json()
        assert len(alerts) == 1

        resolved = client.put(f"/api/v1/alerts/{alerts[0]['id']}/resolve")
        assert resolved.json()["status"] == "resolved"
        assert client.get("/api/v1/alerts", params={"is_resolved": 0}).json() == []

    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "ok"
        assert body["database"] == "ok"
        assert body["inventory"]["CAR_SPOT"]["total"] == 1


class TestEventLoopIsNotBlocked:
    def _record_threads(self, monkeypatch):
        engine = app.state.engine
        threads = {"availability": [], "loop": []}
        original = engine.availability

        def tracked_availability():
            threads["availability"].append(threading.get_ident())
            return original()

        async def on_loop(*args):
            threads["loop"].append(threading.get_ident())

        monkeypatch.setattr(engine, "availability", tracked_availability)
        return threads, on_loop

    def test_entry_reads_availability_off_the_loop(self, client, monkeypatch):
        threads, on_loop = self._record_threads(monkeypatch)
        with patch("parking_engine.routers.parking.record_entry", new=on_loop):
            assert enter(client).status_code == 200

        assert len(threads["availability"]) == 1
        assert threads["availability"][0] != threads["loop"][0]

    def test_exit_reads_availability_off_the_loop(self, client, monkeypatch):
        t1 = enter(client).json()
        threads, on_loop = self._record_threads(monkeypatch)
        with patch("parking_engine.routers.parking.record_exit", new=on_loop):
            assert exit_lot(client, t1["ticket_id"]).status_code == 200

        assert len(threads["availability"]) == 1
        assert threads["availability"][0] != threads["loop"][0]
