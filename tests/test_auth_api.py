import jwt


def test_register_and_login(client):
    resp = client.post("/api/auth/register", json={"username": "alice", "password": "secret123"})
    assert resp.status_code == 201

    resp = client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["budget"] == 9000000
    assert body["user"]["is_admin"] is False
    assert "password" not in body["user"]


def test_register_duplicate(client, user_headers):
    user_headers("alice")
    resp = client.post("/api/auth/register", json={"username": "alice", "password": "other123"})
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Username already exists"


def test_register_validation(client):
    resp = client.post("/api/auth/register", json={"username": "al", "password": "123"})
    assert resp.status_code == 400
    errors = resp.get_json()["errors"]
    assert "username" in errors
    assert "password" in errors


def test_login_wrong_password(client, user_headers):
    user_headers("alice")
    resp = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-pass"})
    assert resp.status_code == 401


def test_me(client, user_headers):
    headers = user_headers("alice")
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["username"] == "alice"


def test_missing_and_bad_tokens(client):
    assert client.get("/api/auth/me").status_code == 401
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_token_signed_with_other_secret(client, user_headers):
    user_headers("alice")
    forged = jwt.encode({"sub": "1", "username": "alice", "is_admin": True},
                        "some-other-secret-that-is-long-enough", algorithm="HS256")
    resp = client.get("/api/admin/stats", headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["database"] is True


def test_unknown_route_is_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Not Found"
