import pytest

from data.csv_loader import CsvFormatError, load_players_csv

HEADER = "Name,University,Category,Total Runs,Balls Faced,Innings Played,Wickets,Overs Bowled,Runs Conceded\n"


def test_valid_rows_become_records():
    result = load_players_csv((
        HEADER
        + "Kasun,Uni A,Batsman,500,400,10,0,0,0\n"
        + "Nuwan,Uni B,Bowler,50,60,5,15,40.3,280\n"
    ).encode())
    assert result.rows_read == 2
    assert result.skipped == 0
    assert result.failed == 0
    kasun, nuwan = result.records
    assert kasun == {
        "name": "Kasun", "university": "Uni A", "category": "Batsman",
        "total_runs": 500, "balls_faced": 400, "innings_played": 10,
        "wickets": 0, "overs_bowled": 0.0, "runs_conceded": 0,
    }
    assert isinstance(nuwan["wickets"], int)
    assert nuwan["overs_bowled"] == pytest.approx(40.3)


def test_headers_are_normalised():
    csv = (
        "name , UNIVERSITY,category,total_runs,BALLS-FACED,innings played\n"
        "Kasun,Uni A,Batsman,120,100,4\n"
    )
    record = load_players_csv(csv.encode()).records[0]
    assert record["name"] == "Kasun"
    assert record["balls_faced"] == 100
    assert record["innings_played"] == 4
    # Missing stat columns default to zero.
    assert record["wickets"] == 0
    assert record["overs_bowled"] == 0.0


def test_unparseable_numbers_become_zero():
    csv = HEADER + 'Kasun,Uni A,Batsman,"1,200",abc,12.5,,0,0\n'
    record = load_players_csv(csv.encode()).records[0]
    assert record["total_runs"] == 1200
    assert record["balls_faced"] == 0
    assert record["innings_played"] == 0
    assert record["wickets"] == 0


def test_incomplete_and_negative_rows():
    csv = (
        HEADER
        + "Kasun,Uni A,Batsman,500,400,10,0,0,0\n"
        + ",Uni C,Batsman,10,10,1,0,0,0\n"
        + "Ravi,,Bowler,10,10,1,0,0,0\n"
        + "Bad,Uni D,Bowler,-5,10,1,0,0,0\n"
    )
    result = load_players_csv(csv.encode())
    assert result.rows_read == 4
    assert result.skipped == 2
    assert result.failed == 1
    assert [r["name"] for r in result.records] == ["Kasun"]


def test_reads_from_path(tmp_path):
    path = tmp_path / "players.csv"
    path.write_text(HEADER + "Kasun,Uni A,Batsman,500,400,10,0,0,0\n")
    assert len(load_players_csv(str(path)).records) == 1


def test_header_only_file():
    result = load_players_csv(HEADER.encode())
    assert result.records == []
    assert result.rows_read == 0


def test_empty_file_rejected():
    with pytest.raises(CsvFormatError):
        load_players_csv(b"")


def test_oversized_counts_fail():
    csv = (
        HEADER
        + "Kasun,Uni A,Batsman,5000000000,400,10,0,0,0\n"
        + "Nuwan,Uni B,Bowler,0,0,0,1,0.0000000001,5\n"
        + "Ravi,Uni C,Batsman,120,100,4,0,0,0\n"
    )
    result = load_players_csv(csv.encode())
    assert result.failed == 1
    assert [r["name"] for r in result.records] == ["Nuwan", "Ravi"]
