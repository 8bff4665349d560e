import asyncio
import threading

import pytest
from starlette.websockets import WebSocketDisconnect

from app.api.endpoints import dashboard as dashboard_endpoint


def test_dashboard_without_data(client):
    stats = client.get("/api/dashboard").json()
    assert stats["readingsLoaded"] is False
    assert stats["pricesLoaded"] is False
    assert stats["tankLevelPercent"] == {"petrol": 0, "diesel": 0}


def test_dashboard_combines_sources(client):
    client.put("/api/settings/fuel-prices", json={"petrolPrice": 20, "dieselPrice": 10})
    client.post("/api/readings", json={
        "petrolPumps": [{"opening": 0, "closing": c} for c in (100, 100, 100, 100)],
        "dieselPumps": [{"opening": 0, "closing": c} for c in (50, 50, 50, 50)],
        "petrolTank": {"opening": 20000, "meterReading": 19.5},
        "dieselTank": {"opening": 20000, "meterReading": 19.8},
    })
    client.post("/api/refills", json={
        "tankType": "diesel", "invoiceNumber": "D-9", "initialDip": 5000,
        "expectedDelivery": 7500, "finalDip": 12500, "signature": True,
    })

    stats = client.get("/api/dashboard").json()
    assert stats["readingsLoaded"] is True
    assert stats["fuelVolume"] == 600
    assert stats["totalSales"] == 400 * 20 + 200 * 10
    assert stats["transactions"] == 30
    assert stats["tankLevels"]["diesel"] == 12500
    assert stats["tankLevelPercent"]["diesel"] == 50


def test_socket_stops_watchers_when_client_leaves(client, monkeypatch):
    stopped = []
    all_stopped = threading.Event()

    async def idle_watch(db, source, queue):
        try:
            await asyncio.Event().wait()
        finally:
            stopped.append(source)
            if len(stopped) == 3:
                all_stopped.set()

    monkeypatch.setattr(dashboard_endpoint, "_watch", idle_watch)
    with client.websocket_connect("/api/dashboard/ws") as websocket:
        assert websocket.receive_json()["readingsLoaded"] is False

    assert all_stopped.wait(timeout=5)
    assert sorted(stopped) == ["prices", "readings", "tankLevels"]


def test_socket_closes_when_a_watcher_fails(client, monkeypatch):
    async def broken_watch(db, source, queue):
        raise RuntimeError("change streams unavailable")

    monkeypatch.setattr(dashboard_endpoint, "_watch", broken_watch)
    with client.websocket_connect("/api/dashboard/ws") as websocket:
        websocket.receive_json()
        with pytest.raises(WebSocketDisconnect) as closed:
            websocket.receive_json()
    assert closed.value.code == 1011
