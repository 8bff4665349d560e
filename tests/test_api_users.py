def _user(**overrides):
    data = {"name": "Chanda Mulenga", "email": "chanda@example.com", "phone": "+260971000000"}
    data.update(overrides)
    return data


def test_create_and_read_user(client):
    response = client.post("/api/users", json=_user())
    assert response.status_code == 201
    user = response.json()
    assert user["role"] == "staff"

    assert client.get(f"/api/users/{user['id']}").json()["email"] == "chanda@example.com"
    assert [u["name"] for u in client.get("/api/users").json()] == ["Chanda Mulenga"]


def test_duplicate_email_rejected(client):
    client.post("/api/users", json=_user())
    response = client.post("/api/users", json=_user(name="Other"))
    assert response.status_code == 400


def test_invalid_fields_rejected(client):
    assert client.post("/api/users", json=_user(email="not-an-email")).status_code == 422
    assert client.post("/api/users", json=_user(name="  ")).status_code == 422
    assert client.post("/api/users", json=_user(role="owner")).status_code == 422


def test_update_user(client):
    user_id = client.post("/api/users", json=_user()).json()["id"]
    other_id = client.post("/api/users", json=_user(email="bwalya@example.com", name="Bwalya")).json()["id"]

    response = client.patch(f"/api/users/{user_id}", json={"role": "admin", "phone": "+260977111111"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["name"] == "Chanda Mulenga"

    conflict = client.patch(f"/api/users/{other_id}", json={"email": "chanda@example.com"})
    assert conflict.status_code == 400


def test_delete_user(client):
    user_id = client.post("/api/users", json=_user()).json()["id"]
    response = client.delete(f"/api/users/{user_id}")
    assert response.status_code == 200
    assert response.json()["email"] == "chanda@example.com"
    assert client.get(f"/api/users/{user_id}").status_code == 404
    assert client.delete(f"/api/users/{user_id}").status_code == 404
