def test_fuel_prices_default_and_update(client):
    default = client.get("/api/settings/fuel-prices").json()
    assert default["petrolPrice"] == 0

    response = client.put("/api/settings/fuel-prices", json={"petrolPrice": 27.5, "dieselPrice": 25.9})
    assert response.status_code == 200
    assert response.json()["lastUpdated"]

    stored = client.get("/api/settings/fuel-prices").json()
    assert stored["petrolPrice"] == 27.5
    assert stored["dieselPrice"] == 25.9


def test_negative_price_rejected(client):
    response = client.put("/api/settings/fuel-prices", json={"petrolPrice": -1, "dieselPrice": 25})
    assert response.status_code == 422


def test_system_profile_keeps_creation_date(client):
    assert client.get("/api/settings/system-profile").status_code == 404
    assert client.put("/api/settings/system-profile", json={"name": "   "}).status_code == 422

    created = client.put("/api/settings/system-profile", json={"name": "Kafue Road Station"}).json()
    updated = client.put("/api/settings/system-profile", json={"name": "  Kafue Rd  "}).json()

    assert updated["name"] == "Kafue Rd"
    assert updated["createdAt"] == created["createdAt"]
    assert client.get("/api/settings/system-profile").json()["name"] == "Kafue Rd"


def test_clear_data_requires_confirmation(client):
    client.post("/api/genset/readings", json={"runningHours": 10})
    response = client.delete("/api/settings/data")
    assert response.status_code == 400
    assert len(client.get("/api/genset/readings").json()) == 1


def test_clear_data_keeps_settings(client):
    client.put("/api/settings/fuel-prices", json={"petrolPrice": 27.5, "dieselPrice": 25.9})
    client.post("/api/genset/readings", json={"runningHours": 10})
    client.post("/api/genset/readings", json={"runningHours": 16})
    client.post("/api/refills", json={
        "invoiceNumber": "X1", "initialDip": 100, "expectedDelivery": 1000,
        "finalDip": 1100, "signature": True,
    })

    response = client.delete("/api/settings/data", params={"confirm": "true"})
    assert response.status_code == 200
    deleted = response.json()["deleted"]
    assert deleted["gensetReadings"] == 2
    assert deleted["tankRefills"] == 1

    assert client.get("/api/genset/readings").json() == []
    assert client.get("/api/refills").json() == []
    assert client.get("/api/settings/fuel-prices").json()["petrolPrice"] == 27.5
