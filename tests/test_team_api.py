from conftest import contains_key

STAR = {"total_runs": 5000, "balls_faced": 1000, "innings_played": 1}


def _buy(client, headers, player_id):
    return client.post("/api/teams/players", json={"player_id": player_id}, headers=headers)


def test_players_list_hides_points(client, user_headers, make_player):
    headers = user_headers()
    make_player(name="Kasun", total_runs=500, balls_faced=400, innings_played=10,
                wickets=15, overs_bowled=40, runs_conceded=280)
    resp = client.get("/api/players", headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["budget"] == 9000000
    player = body["players"][0]
    assert player["player_value"] == 1150000
    assert player["bowling_strike_rate"] == 16.0
    assert player["economy_rate_display"] == "7.00"
    assert not contains_key(body, "points")


def test_undefined_rates(client, user_headers, make_player):
    headers = user_headers()
    player_id = make_player(name="Kasun", total_runs=50, balls_faced=40, innings_played=2)
    player = client.get(f"/api/players/{player_id}", headers=headers).get_json()
    assert player["bowling_strike_rate"] is None
    assert player["economy_rate"] is None
    assert player["bowling_strike_rate_display"] == "Undefined"
    assert player["economy_rate_display"] == "Undefined"


def test_player_not_found(client, user_headers):
    assert client.get("/api/players/99", headers=user_headers()).status_code == 404


def test_players_list_filters(client, user_headers, make_player):
    headers = user_headers()
    cheap = make_player(name="Cheap")
    make_player(name="Star", **STAR)
    make_player(name="Bowler", category="Bowler")
    _buy(client, headers, cheap)

    names = {p["name"] for p in client.get("/api/players", headers=headers).get_json()["players"]}
    # Owned and unaffordable players are hidden.
    assert names == {"Bowler"}

    resp = client.get("/api/players?category=batsmen", headers=headers)
    assert {p["name"] for p in resp.get_json()["players"]} == {"Star"}


def test_buy_and_sell(client, user_headers, make_player):
    headers = user_headers()
    player_id = make_player(name="Kasun", total_runs=500, balls_faced=400, innings_played=10,
                            wickets=15, overs_bowled=40, runs_conceded=280)

    resp = _buy(client, headers, player_id)
    assert resp.status_code == 200
    assert resp.get_json()["remaining_budget"] == 9000000 - 1150000

    team = client.get("/api/teams", headers=headers).get_json()
    assert team["players_count"] == 1
    assert team["is_complete"] is False
    assert team["total_points"] == 116.25
    assert team["budget"] == 7850000
    assert not contains_key(team["players"], "points")

    assert _buy(client, headers, player_id).status_code == 400

    resp = client.delete(f"/api/teams/players/{player_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["budget"] == 9000000

    resp = client.delete(f"/api/teams/players/{player_id}", headers=headers)
    assert resp.status_code == 400


def test_buy_validation(client, user_headers):
    headers = user_headers()
    assert _buy(client, headers, 0).status_code == 400
    assert _buy(client, headers, "7").status_code == 400
    assert _buy(client, headers, 42).status_code == 404


def test_insufficient_budget(client, user_headers, make_player):
    headers = user_headers()
    star = make_player(name="Star", **STAR)
    resp = _buy(client, headers, star)
    assert resp.status_code == 400
    assert "Insufficient budget" in resp.get_json()["message"]


def test_eleven_player_limit(client, user_headers, make_player):
    headers = user_headers()
    ids = [make_player() for _ in range(12)]
    for player_id in ids[:11]:
        assert _buy(client, headers, player_id).status_code == 200

    team = client.get("/api/teams", headers=headers).get_json()
    assert team["players_count"] == 11
    assert team["is_complete"] is True

    resp = _buy(client, headers, ids[11])
    assert resp.status_code == 400
    assert "maximum number of players" in resp.get_json()["message"]


def test_leaderboard_ranks_complete_teams_only(client, user_headers, make_player):
    alice = user_headers("alice")
    bob = user_headers("bob")
    ids = [make_player(total_runs=10 * i, balls_faced=100, innings_played=1)
           for i in range(1, 13)]
    for player_id in ids[:11]:
        _buy(client, alice, player_id)
    _buy(client, bob, ids[11])

    board = client.get("/api/leaderboard", headers=alice).get_json()
    assert [e["username"] for e in board] == ["alice"]
    assert board[0]["rank"] == 1
    assert board[0]["players_count"] == 11

    board = client.get("/api/leaderboard", headers=bob).get_json()
    assert [(e["username"], e["rank"], e["is_complete"]) for e in board] == [
        ("alice", 1, True), ("bob", 0, False),
    ]
    assert not contains_key(board, "points")


def test_leaderboard_orders_by_total(client, user_headers, make_player):
    weak = user_headers("weak")
    strong = user_headers("strong")
    for i in range(11):
        _buy(client, weak, make_player(total_runs=10, balls_faced=100, innings_played=1))
        _buy(client, strong, make_player(total_runs=40, balls_faced=100, innings_played=1))

    board = client.get("/api/leaderboard", headers=weak).get_json()
    assert [e["username"] for e in board] == ["strong", "weak"]
    assert [e["rank"] for e in board] == [1, 2]
    assert board[0]["total_points"] > board[1]["total_points"]
