import pytest

from services.errors import ConflictError, NotFoundError, TeamRuleError
from services.store import FantasyStore, identity_key

BUDGET = 9000000
ZERO_STATS = {
    "total_runs": 0, "balls_faced": 0, "innings_played": 0,
    "wickets": 0, "overs_bowled": 0.0, "runs_conceded": 0,
}


@pytest.fixture
def db(tmp_path):
    return FantasyStore(str(tmp_path / "store.db"))


def _player(db, name, university="Uni A", category="Batsman", **stats):
    data = dict(ZERO_STATS, **stats)
    data.update(name=name, university=university, category=category)
    return db.create_player(data)


def _user(db, username="alice", budget=BUDGET):
    return db.create_user(username, "hash", budget, "My Team")


def test_create_user_makes_default_team(db):
    user_id = _user(db)
    team = db.get_team_for_user(user_id)
    assert team["team_name"] == "My Team"
    assert db.get_user(user_id)["budget"] == BUDGET


def test_duplicate_username(db):
    _user(db)
    with pytest.raises(ConflictError):
        _user(db)
    assert db.get_counts()["team_count"] == 1


def test_identity_key_ignores_case_and_spacing():
    assert identity_key(" Kasun ", "UNI A") == identity_key("kasun", "uni a")


def test_duplicate_player_rejected(db):
    _player(db, "Kasun")
    with pytest.raises(ConflictError):
        _player(db, " kasun ", university="uni a")
    _player(db, "Kasun", university="Uni B")
    assert len(db.list_players()) == 2


def test_update_player(db):
    kasun = _player(db, "Kasun")
    nuwan = _player(db, "Nuwan")
    with pytest.raises(NotFoundError):
        db.update_player(999, dict(ZERO_STATS, name="X", university="Y", category="Bowler"))
    with pytest.raises(ConflictError):
        db.update_player(nuwan, dict(ZERO_STATS, name="Kasun", university="Uni A",
                                     category="Bowler"))
    db.update_player(kasun, dict(ZERO_STATS, name="Kasun", university="Uni A",
                                 category="Bowler", wickets=4))
    assert db.get_player(kasun)["wickets"] == 4


def test_buy_and_sell_restore_budget(db):
    user_id = _user(db)
    player_id = _player(db, "Kasun", total_runs=500, balls_faced=400, innings_played=10,
                        wickets=15, overs_bowled=40, runs_conceded=280)
    assert db.add_player_to_team(user_id, player_id, 11) == BUDGET - 1150000
    assert db.get_team_player_ids(user_id) == {player_id}
    assert db.remove_player_from_team(user_id, player_id) == BUDGET
    assert db.get_team_player_ids(user_id) == set()


def test_buy_rules(db):
    user_id = _user(db)
    player_id = _player(db, "Kasun")
    with pytest.raises(NotFoundError):
        db.add_player_to_team(user_id, 999, 11)
    db.add_player_to_team(user_id, player_id, 11)
    with pytest.raises(TeamRuleError, match="already in team"):
        db.add_player_to_team(user_id, player_id, 11)
    with pytest.raises(TeamRuleError, match="not in your team"):
        db.remove_player_from_team(user_id, 999)


def test_team_size_cap(db):
    user_id = _user(db)
    ids = [_player(db, f"Player {i}") for i in range(12)]
    for player_id in ids[:11]:
        db.add_player_to_team(user_id, player_id, 11)
    with pytest.raises(TeamRuleError, match=r"maximum number of players \(11\)"):
        db.add_player_to_team(user_id, ids[11], 11)
    assert db.get_user(user_id)["budget"] == BUDGET - 11 * 100000


def test_insufficient_budget_leaves_state_unchanged(db):
    user_id = _user(db, budget=150000)
    star = _player(db, "Star", total_runs=500, balls_faced=400, innings_played=10)
    with pytest.raises(TeamRuleError, match="Insufficient budget"):
        db.add_player_to_team(user_id, star, 11)
    assert db.get_user(user_id)["budget"] == 150000
    assert db.get_team_player_ids(user_id) == set()


def test_delete_player_refunds_owners(db):
    alice = _user(db, "alice")
    bob = _user(db, "bob")
    player_id = _player(db, "Kasun")
    db.add_player_to_team(alice, player_id, 11)
    db.add_player_to_team(bob, player_id, 11)
    db.delete_player(player_id)
    assert db.get_user(alice)["budget"] == BUDGET
    assert db.get_user(bob)["budget"] == BUDGET
    assert db.get_team_player_ids(alice) == set()
    with pytest.raises(NotFoundError):
        db.delete_player(player_id)


def test_clear_players_resets_ids(db):
    user_id = _user(db)
    first = _player(db, "Kasun")
    _player(db, "Nuwan")
    db.add_player_to_team(user_id, first, 11)
    assert db.clear_players() == 2
    assert db.get_user(user_id)["budget"] == BUDGET
    assert _player(db, "Ravi") == 1


def test_import_players(db):
    records = [
        dict(ZERO_STATS, name="Kasun", university="Uni A", category="Batsman", total_runs=100),
        dict(ZERO_STATS, name="Nuwan", university="Uni B", category="Bowler", wickets=5),
    ]
    assert db.import_players(records) == (2, 0, 0)
    assert db.import_players(records) == (0, 0, 2)

    records[0]["total_runs"] = 300
    assert db.import_players(records, update_existing=True) == (0, 2, 0)
    assert db.search_players_by_name("Kas")[0]["total_runs"] == 300


def test_page_players_filters(db):
    for i in range(12):
        _player(db, f"Bat {i}", category="Batsmen" if i % 2 else "Batsman")
    _player(db, "Bowl", university="Uni Z", category="Bowler")

    page = db.page_players(page=2, per_page=5, category="Batsman")
    assert page["total"] == 12
    assert page["pages"] == 3
    assert len(page["players"]) == 5

    assert db.page_players(search="Uni Z")["total"] == 1
    assert db.page_players(category="All")["total"] == 13


def test_top_players_only_positive(db):
    _player(db, "Kasun", total_runs=300)
    _player(db, "Ravi", total_runs=500)
    _player(db, "Nuwan", category="Bowler", wickets=7)
    assert [r["name"] for r in db.top_players("total_runs")] == ["Ravi", "Kasun"]
    assert [r["name"] for r in db.top_players("wickets")] == ["Nuwan"]
    with pytest.raises(ValueError):
        db.top_players("points")


def test_rosters_and_totals(db):
    user_id = _user(db)
    player_id = _player(db, "Kasun")
    db.add_player_to_team(user_id, player_id, 11)
    rosters = db.get_team_rosters()
    assert len(rosters) == 1
    assert rosters[0]["team"]["username"] == "alice"
    assert [p["player_id"] for p in rosters[0]["players"]] == [player_id]

    team_id = rosters[0]["team"]["team_id"]
    db.save_team_totals({team_id: 42.5})
    assert db.get_team_for_user(user_id)["total_points"] == 42.5
