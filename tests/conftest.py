import pytest

from app import create_app
from services.auth import hash_password

DEFAULT_STATS = {
    "total_runs": 0,
    "balls_faced": 0,
    "innings_played": 0,
    "wickets": 0,
    "overs_bowled": 0.0,
    "runs_conceded": 0,
}


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", {
        "DATABASE_PATH": str(tmp_path / "fantasy.db"),
        "LOG_DIR": str(tmp_path / "logs"),
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions["fantasy_store"]


@pytest.fixture
def make_player(store):
    """Insert a player and return its id; stats default to zero."""
    counter = {"n": 0}

    def _make(name=None, university="Uni A", category="Batsman", **stats):
        counter["n"] += 1
        data = dict(DEFAULT_STATS, **stats)
        data.update(name=name or f"Player {counter['n']}",
                    university=university, category=category)
        return store.create_player(data)

    return _make


@pytest.fixture
def login(client):
    def _login(username, password):
        resp = client.post("/api/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}
    return _login


@pytest.fixture
def user_headers(client, login):
    """Register a fresh user and return auth headers for them."""
    def _user(username="alice", password="secret123"):
        resp = client.post("/api/auth/register", json={"username": username, "password": password})
        assert resp.status_code == 201, resp.get_json()
        return login(username, password)
    return _user


@pytest.fixture
def admin_headers(app, store, login):
    store.create_user(
        username="admin",
        password_hash=hash_password("adminpass"),
        budget=app.config["DEFAULT_BUDGET"],
        team_name=app.config["DEFAULT_TEAM_NAME"],
        is_admin=True,
    )
    return login("admin", "adminpass")


def contains_key(payload, key):
    """True when `key` appears anywhere in a decoded JSON payload."""
    if isinstance(payload, dict):
        return key in payload or any(contains_key(v, key) for v in payload.values())
    if isinstance(payload, list):
        return any(contains_key(v, key) for v in payload)
    return False
