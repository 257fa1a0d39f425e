"""
Tests for registration, login and session cookies.
"""


def test_register_login_and_me(client):
    response = client.post("/auth/register", json={
        "username": "carla_diaz",
        "email": "carla@test.com",
        "password": "secret123",
        "first_name": "Carla",
        "last_name": "Díaz",
    })
    assert response.status_code == 201
    assert response.json()["username"] == "carla_diaz"

    login = client.post("/auth/login", json={"username": "carla_diaz", "password": "secret123"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    client.cookies.clear()
    client.cookies.set("access_token", f"Bearer {token}")
    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["role"] == "user"


def test_duplicate_registration_rejected(client, user):
    response = client.post("/auth/register", json={
        "username": user.username,
        "email": "another@test.com",
        "password": "secret123",
        "first_name": "Ana",
        "last_name": "Torres",
    })
    assert response.status_code == 400


def test_wrong_password_rejected(client, user):
    response = client.post("/auth/login", json={"username": user.username, "password": "wrong-pass"})
    assert response.status_code == 401


def test_invalid_token_rejected(client):
    client.cookies.set("access_token", "Bearer not-a-jwt")
    assert client.get("/auth/me").status_code == 401
