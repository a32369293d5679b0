from models.users import User

from helpers import image_file, stored_files


def login(client, email="agent@example.com", password="secret123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_login_returns_token_and_user(client, user):
    resp = login(client)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "success"
    assert body["token"]
    assert body["user"]["email"] == "agent@example.com"
    assert "password" not in body["user"]


def test_token_authenticates_me(client, user):
    token = login(client).get_json()["token"]

    fresh = client.application.test_client()
    resp = fresh.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.get_json()["user"]["id"] == str(user["_id"])


def test_login_sets_no_cookie_credentials(client, user):
    resp = login(client)

    assert "Set-Cookie" not in resp.headers
    assert client.get("/api/auth/me").status_code == 401


def test_cookie_only_upload_is_rejected(client, user, upload_folder):
    login(client)
    resp = client.post("/api/users/profile/picture", data=image_file(),
                       content_type="multipart/form-data")

    assert resp.status_code == 401
    assert stored_files(upload_folder) == []


def test_logout_succeeds(client):
    resp = client.post("/api/auth/logout")
    assert resp.get_json()["status"] == "success"


def test_bad_credentials(client, user):
    assert login(client, password="wrong").status_code == 401
    assert login(client, email="nobody@example.com").status_code == 401
    assert client.post("/api/auth/login", json={}).status_code == 400
    assert client.post("/api/auth/login", json={"email": 42, "password": "x"}).status_code == 400


def test_inactive_account_cannot_login(client, make_user):
    make_user(email="gone@example.com", status="Inactive")
    resp = login(client, email="gone@example.com")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Account is inactive"


def test_tampered_token_rejected(client, user, auth_headers):
    headers = auth_headers(user)
    headers["Authorization"] += "x"
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_token_for_deleted_user_rejected(app, client, user, auth_headers):
    headers = auth_headers(user)
    with app.app_context():
        User.delete(user["_id"])
    assert client.get("/api/auth/me", headers=headers).status_code == 401
