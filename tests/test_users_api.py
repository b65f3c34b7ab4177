"""Registration, login, auth gating and profile routes."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_root_and_health(client: TestClient) -> None:
    assert client.get("/").json() == {"message": "Welcome to the Vesture API"}
    health = client.get("/healthz")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"


def test_register_then_login(client: TestClient) -> None:
    created = client.post(
        "/api/users", json={"username": "ana", "email": "Ana@Example.com", "password": "secret123"}
    )
    assert created.status_code == 201
    body = created.json()
    assert body["user"]["email"] == "ana@example.com"
    assert "password_hash" not in body["user"]
    assert body["token"]

    login = client.post("/api/users/login", json={"email": "ana@example.com", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["user_id"] == body["user_id"]


def test_login_with_wrong_password_is_unauthenticated(client: TestClient, register) -> None:
    register("ana")
    response = client.post("/api/users/login", json={"email": "ana@example.com", "password": "nope-nope"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid email or password"}


def test_duplicate_email_is_rejected(client: TestClient, register) -> None:
    register("ana")
    response = client.post(
        "/api/users", json={"username": "other", "email": "ANA@example.com", "password": "secret123"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


def test_register_validation_errors(client: TestClient) -> None:
    response = client.post("/api/users", json={"username": "ana", "email": "not-an-email", "password": "123"})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request"
    fields = {error["field"] for error in body["errors"]}
    assert {"body.email", "body.password"} <= fields


def test_malformed_path_id_is_a_validation_error(client: TestClient) -> None:
    response = client.get("/api/users/not-an-id")
    assert response.status_code == 400


def test_mutations_require_a_valid_token(client: TestClient, register) -> None:
    ana = register("ana")

    missing = client.put(f"/api/users/{ana['id']}/bio", json={"bio": "hi"})
    assert missing.status_code == 401

    invalid = client.put(
        f"/api/users/{ana['id']}/bio", json={"bio": "hi"}, headers={"Authorization": "Bearer garbage"}
    )
    assert invalid.status_code == 403


def test_users_cannot_edit_each_other(client: TestClient, register) -> None:
    ana = register("ana")
    ben = register("ben")
    response = client.put(f"/api/users/{ana['id']}", json={"username": "hacked"}, headers=ben["headers"])
    assert response.status_code == 403


def test_profile_lifecycle(client: TestClient, register) -> None:
    ana = register("ana")
    url = f"/api/users/{ana['id']}"

    added = client.post(f"{url}/profile", json={"bio": "first", "website": "https://a.example"}, headers=ana["headers"])
    assert added.json()["user"]["bio"] == "first"

    # add only fills empty fields
    again = client.post(f"{url}/profile", json={"bio": "second", "profile_photo": "p.jpg"}, headers=ana["headers"])
    assert again.json()["user"]["bio"] == "first"
    assert again.json()["user"]["profile_photo"] == "p.jpg"

    updated = client.put(f"{url}/bio", json={"bio": "third"}, headers=ana["headers"])
    assert updated.json()["user"]["bio"] == "third"

    photo = client.delete(f"{url}/profile-photo", headers=ana["headers"])
    assert photo.json()["user"]["profile_photo"] is None

    cleared = client.delete(f"{url}/profile", headers=ana["headers"])
    user = cleared.json()["user"]
    assert (user["bio"], user["profile_photo"], user["website"]) == ("", None, "")


def test_update_list_and_delete_user(client: TestClient, register) -> None:
    ana = register("ana")
    response = client.put(
        f"/api/users/{ana['id']}",
        json={"username": "ana2", "password": "newpass1"},
        headers=ana["headers"],
    )
    assert response.json()["user"]["username"] == "ana2"
    login = client.post("/api/users/login", json={"email": "ana@example.com", "password": "newpass1"})
    assert login.status_code == 200

    listed = client.get("/api/users").json()
    assert listed == [
        {"id": ana["id"], "username": "ana2", "email": "ana@example.com", "follower_count": 0, "following_count": 0}
    ]

    assert client.delete(f"/api/users/{ana['id']}", headers=ana["headers"]).status_code == 200
    assert client.get(f"/api/users/{ana['id']}").status_code == 404


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
