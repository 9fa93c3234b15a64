"""
store.py — SQLite-backed store for users, teams and players.

Only the six raw statistics of a player are persisted. Rates, values and
team totals are recomputed by scoring.valuation on every read; the single
exception is teams.total_points, which holds the ranking score written by
the leaderboard after it recomputes every total.

Every check-then-write sequence (buying a player, selling one, registering
a user with a default team, importing a batch) runs inside one
BEGIN IMMEDIATE transaction guarded by a process-wide lock.
"""
import os
import sqlite3
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from threading import Lock

from scoring.categories import category_aliases, is_category_filter
from scoring.valuation import PlayerStatistics, STAT_FIELDS, compute_stats
from services.errors import ConflictError, NotFoundError, TeamRuleError

logger = logging.getLogger("fantasy")

PLAYER_COLUMNS = ("player_id", "name", "university", "category") + STAT_FIELDS


def identity_key(name, university):
    """Duplicate-detection key: a player is unique per name and university."""
    return f"{(name or '').strip().lower()}|{(university or '').strip().lower()}"


def player_value(row):
    return compute_stats(PlayerStatistics.from_mapping(row)).player_value


class FantasyStore:
    """Thread-safe SQLite store."""

    def __init__(self, db_path):
        self.db_path = db_path
        self._lock = Lock()
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        self._init_db()

    # ── Connections ──────────────────────────────────────────────────────

    def _get_conn(self):
        conn = sqlite3.connect(self.db_path, check_same_thread=False,
                               isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _read(self):
        conn = self._get_conn()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _transaction(self):
        """Serialise writers and commit or roll back as one unit."""
        with self._lock:
            conn = self._get_conn()
            try:
                conn.execute("BEGIN IMMEDIATE")
                yield conn
                conn.execute("COMMIT")
            except Exception:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            finally:
                conn.close()

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._transaction() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    user_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    password TEXT NOT NULL,
                    budget INTEGER NOT NULL,
                    created_at DATETIME NOT NULL,
                    is_admin BOOLEAN NOT NULL DEFAULT 0
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS teams (
                    team_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
                    team_name TEXT NOT NULL,
                    total_points REAL NOT NULL DEFAULT 0
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS players (
                    player_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    university TEXT NOT NULL,
                    category TEXT NOT NULL,
                    total_runs INTEGER NOT NULL DEFAULT 0,
                    balls_faced INTEGER NOT NULL DEFAULT 0,
                    innings_played INTEGER NOT NULL DEFAULT 0,
                    wickets INTEGER NOT NULL DEFAULT 0,
                    overs_bowled REAL NOT NULL DEFAULT 0,
                    runs_conceded INTEGER NOT NULL DEFAULT 0
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS team_players (
                    team_id INTEGER NOT NULL REFERENCES teams(team_id) ON DELETE CASCADE,
                    player_id INTEGER NOT NULL REFERENCES players(player_id) ON DELETE CASCADE,
                    PRIMARY KEY (team_id, player_id)
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_teams_user
                ON teams(user_id)
            """)
        logger.info(f"Fantasy DB initialised: {self.db_path}")

    def ping(self):
        with self._read() as conn:
            conn.execute("SELECT 1").fetchone()
        return True

    # ── Users ────────────────────────────────────────────────────────────

    def create_user(self, username, password_hash, budget, team_name,
                    is_admin=False):
        """Insert a user and their default empty team; returns user_id."""
        with self._transaction() as conn:
            exists = conn.execute(
                "SELECT 1 FROM users WHERE username = ?", (username,)
            ).fetchone()
            if exists:
                raise ConflictError("Username already exists")

            cur = conn.execute(
                """INSERT INTO users (username, password, budget, created_at, is_admin)
                   VALUES (?, ?, ?, ?, ?)""",
                (username, password_hash, budget,
                 datetime.now(timezone.utc).isoformat(), bool(is_admin)),
            )
            user_id = cur.lastrowid
            conn.execute(
                "INSERT INTO teams (user_id, team_name, total_points) VALUES (?, ?, 0)",
                (user_id, team_name),
            )
        logger.info(f"User {username} registered with ID {user_id}")
        return user_id

    def get_user(self, user_id):
        with self._read() as conn:
            return conn.execute(
                "SELECT * FROM users WHERE user_id = ?", (user_id,)
            ).fetchone()

    def get_user_by_username(self, username):
        with self._read() as conn:
            return conn.execute(
                "SELECT * FROM users WHERE username = ?", (username,)
            ).fetchone()

    def set_admin(self, username, is_admin=True):
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE users SET is_admin = ? WHERE username = ?",
                (bool(is_admin), username),
            )
            if cur.rowcount == 0:
                raise NotFoundError(f"User {username} not found")

    # ── Players ──────────────────────────────────────────────────────────

    def list_players(self):
        with self._read() as conn:
            return conn.execute(
                "SELECT * FROM players ORDER BY player_id"
            ).fetchall()

    def get_player(self, player_id):
        with self._read() as conn:
            return conn.execute(
                "SELECT * FROM players WHERE player_id = ?", (player_id,)
            ).fetchone()

    def search_players_by_name(self, name, limit=5):
        with self._read() as conn:
            return conn.execute(
                """SELECT * FROM players WHERE name LIKE ?
                   ORDER BY name LIMIT ?""",
                (f"%{name}%", limit),
            ).fetchall()

    def page_players(self, page=1, per_page=10, search="", category=""):
        """Paginated, filtered player rows for the admin console."""
        page = max(page, 1)
        per_page = max(per_page, 1)
        offset = (page - 1) * per_page
        where_parts = []
        params = []

        if search:
            where_parts.append("(name LIKE ? OR university LIKE ?)")
            params += [f"%{search}%", f"%{search}%"]
        if is_category_filter(category):
            aliases = category_aliases(category)
            where_parts.append(
                f"LOWER(TRIM(category)) IN ({', '.join('?' for _ in aliases)})"
            )
            params += aliases

        where_clause = " AND ".join(where_parts) if where_parts else "1=1"

        with self._read() as conn:
            count = conn.execute(
                f"SELECT COUNT(*) FROM players WHERE {where_clause}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"""SELECT * FROM players
                    WHERE {where_clause}
                    ORDER BY player_id
                    LIMIT ? OFFSET ?""",
                params + [per_page, offset],
            ).fetchall()

        return {
            "players": rows,
            "page": page,
            "per_page": per_page,
            "total": count,
            "pages": (count + per_page - 1) // per_page,
        }

    def _find_identity(self, conn, name, university, exclude_id=None):
        rows = conn.execute(
            """SELECT player_id FROM players
               WHERE LOWER(TRIM(name)) = ? AND LOWER(TRIM(university)) = ?""",
            (name.strip().lower(), university.strip().lower()),
        ).fetchall()
        return next((r[0] for r in rows if r[0] != exclude_id), None)

    def create_player(self, data):
        with self._transaction() as conn:
            if self._find_identity(conn, data["name"], data["university"]):
                raise ConflictError(
                    f"A player named '{data['name']}' from '{data['university']}' already exists"
                )
            cur = conn.execute(
                f"""INSERT INTO players ({', '.join(PLAYER_COLUMNS[1:])})
                    VALUES ({', '.join('?' for _ in PLAYER_COLUMNS[1:])})""",
                [data[c] for c in PLAYER_COLUMNS[1:]],
            )
            return cur.lastrowid

    def update_player(self, player_id, data):
        with self._transaction() as conn:
            exists = conn.execute(
                "SELECT 1 FROM players WHERE player_id = ?", (player_id,)
            ).fetchone()
            if not exists:
                raise NotFoundError(f"Player with ID {player_id} not found")
            if self._find_identity(conn, data["name"], data["university"],
                                   exclude_id=player_id):
                raise ConflictError(
                    f"Another player named '{data['name']}' from '{data['university']}' already exists"
                )
            assignments = ", ".join(f"{c} = ?" for c in PLAYER_COLUMNS[1:])
            conn.execute(
                f"UPDATE players SET {assignments} WHERE player_id = ?",
                [data[c] for c in PLAYER_COLUMNS[1:]] + [player_id],
            )

    def _refund_owners(self, conn, player_row):
        """Credit every owner of a player its current value before removal."""
        value = player_value(player_row)
        owners = conn.execute(
            """SELECT t.user_id FROM team_players tp
               JOIN teams t ON t.team_id = tp.team_id
               WHERE tp.player_id = ?""",
            (player_row["player_id"],),
        ).fetchall()
        for owner in owners:
            conn.execute(
                "UPDATE users SET budget = budget + ? WHERE user_id = ?",
                (value, owner["user_id"]),
            )
        conn.execute("DELETE FROM team_players WHERE player_id = ?",
                     (player_row["player_id"],))
        return len(owners)

    def delete_player(self, player_id):
        """Delete a player, refunding and detaching every team that owns them."""
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM players WHERE player_id = ?", (player_id,)
            ).fetchone()
            if not row:
                raise NotFoundError(f"Player with ID {player_id} not found")
            refunded = self._refund_owners(conn, row)
            conn.execute("DELETE FROM players WHERE player_id = ?", (player_id,))
        logger.info(f"Deleted player {player_id} (refunded {refunded} teams)")

    def clear_players(self):
        """Delete every player; owners are refunded. Returns rows deleted."""
        with self._transaction() as conn:
            rows = conn.execute("SELECT * FROM players").fetchall()
            for row in rows:
                self._refund_owners(conn, row)
            conn.execute("DELETE FROM players")
            conn.execute("DELETE FROM sqlite_sequence WHERE name = 'players'")
        logger.info(f"Cleared {len(rows)} players")
        return len(rows)

    def import_players(self, records, update_existing=False):
        """
        Insert or update a batch of validated player records.

        Parameters
        ----------
        records : list of dict — name, university, category and the six stats
        update_existing : bool — overwrite stats of players already stored

        Returns (added, updated, skipped).
        """
        added = updated = skipped = 0
        with self._transaction() as conn:
            existing = {
                identity_key(r["name"], r["university"]): r["player_id"]
                for r in conn.execute("SELECT player_id, name, university FROM players")
            }
            for record in records:
                key = identity_key(record["name"], record["university"])
                existing_id = existing.get(key)
                if existing_id is None:
                    cur = conn.execute(
                        f"""INSERT INTO players ({', '.join(PLAYER_COLUMNS[1:])})
                            VALUES ({', '.join('?' for _ in PLAYER_COLUMNS[1:])})""",
                        [record[c] for c in PLAYER_COLUMNS[1:]],
                    )
                    existing[key] = cur.lastrowid
                    added += 1
                elif update_existing:
                    columns = ("category",) + STAT_FIELDS
                    conn.execute(
                        f"""UPDATE players SET {', '.join(f'{c} = ?' for c in columns)}
                            WHERE player_id = ?""",
                        [record[c] for c in columns] + [existing_id],
                    )
                    updated += 1
                else:
                    skipped += 1
        logger.info(f"Import stored: added={added} updated={updated} skipped={skipped}")
        return added, updated, skipped

    def top_players(self, column, limit=5):
        """Players with a positive value in `column`, highest first."""
        if column not in ("total_runs", "wickets"):
            raise ValueError(f"Unsupported ranking column: {column}")
        with self._read() as conn:
            return conn.execute(
                f"""SELECT * FROM players WHERE {column} > 0
                    ORDER BY {column} DESC, player_id LIMIT ?""",
                (limit,),
            ).fetchall()

    def get_counts(self):
        with self._read() as conn:
            return {
                "player_count": conn.execute("SELECT COUNT(*) FROM players").fetchone()[0],
                "user_count": conn.execute("SELECT COUNT(*) FROM users").fetchone()[0],
                "team_count": conn.execute("SELECT COUNT(*) FROM teams").fetchone()[0],
            }

    def get_totals(self):
        with self._read() as conn:
            row = conn.execute(
                """SELECT COUNT(*) AS total_players,
                          COALESCE(SUM(total_runs), 0) AS total_runs,
                          COALESCE(SUM(wickets), 0) AS total_wickets
                   FROM players"""
            ).fetchone()
        return dict(row)

    # ── Teams ────────────────────────────────────────────────────────────

    def get_team_for_user(self, user_id):
        with self._read() as conn:
            return conn.execute(
                "SELECT * FROM teams WHERE user_id = ? ORDER BY team_id LIMIT 1",
                (user_id,),
            ).fetchone()

    def get_team_players(self, team_id):
        with self._read() as conn:
            return conn.execute(
                """SELECT p.* FROM team_players tp
                   JOIN players p ON p.player_id = tp.player_id
                   WHERE tp.team_id = ?
                   ORDER BY p.player_id""",
                (team_id,),
            ).fetchall()

    def get_team_player_ids(self, user_id):
        with self._read() as conn:
            rows = conn.execute(
                """SELECT tp.player_id FROM team_players tp
                   JOIN teams t ON t.team_id = tp.team_id
                   WHERE t.user_id = ?""",
                (user_id,),
            ).fetchall()
        return {r[0] for r in rows}

    def _team_id_for(self, conn, user_id):
        row = conn.execute(
            "SELECT team_id FROM teams WHERE user_id = ? ORDER BY team_id LIMIT 1",
            (user_id,),
        ).fetchone()
        if not row:
            raise TeamRuleError("User doesn't have a team")
        return row[0]

    def add_player_to_team(self, user_id, player_id, team_size):
        """Buy a player for the user's team; returns the remaining budget."""
        with self._transaction() as conn:
            team_id = self._team_id_for(conn, user_id)
            player = conn.execute(
                "SELECT * FROM players WHERE player_id = ?", (player_id,)
            ).fetchone()
            if not player:
                raise NotFoundError("Player not found")

            already = conn.execute(
                "SELECT 1 FROM team_players WHERE team_id = ? AND player_id = ?",
                (team_id, player_id),
            ).fetchone()
            if already:
                raise TeamRuleError("Player already in team")

            count = conn.execute(
                "SELECT COUNT(*) FROM team_players WHERE team_id = ?", (team_id,)
            ).fetchone()[0]
            if count >= team_size:
                raise TeamRuleError(
                    f"Team already has maximum number of players ({team_size})"
                )

            value = player_value(player)
            budget = conn.execute(
                "SELECT budget FROM users WHERE user_id = ?", (user_id,)
            ).fetchone()[0]
            if budget < value:
                raise TeamRuleError(
                    f"Insufficient budget. Player value: {value}, Your budget: {budget}"
                )

            conn.execute(
                "INSERT INTO team_players (team_id, player_id) VALUES (?, ?)",
                (team_id, player_id),
            )
            new_budget = budget - value
            conn.execute(
                "UPDATE users SET budget = ? WHERE user_id = ?", (new_budget, user_id)
            )
        logger.info(f"User {user_id} bought player {player_id} for {value}")
        return new_budget

    def remove_player_from_team(self, user_id, player_id):
        """Sell a player at their current value; returns the new budget."""
        with self._transaction() as conn:
            team_id = self._team_id_for(conn, user_id)
            player = conn.execute(
                """SELECT p.* FROM team_players tp
                   JOIN players p ON p.player_id = tp.player_id
                   WHERE tp.team_id = ? AND tp.player_id = ?""",
                (team_id, player_id),
            ).fetchone()
            if not player:
                raise TeamRuleError("Player is not in your team")

            value = player_value(player)
            conn.execute(
                "DELETE FROM team_players WHERE team_id = ? AND player_id = ?",
                (team_id, player_id),
            )
            conn.execute(
                "UPDATE users SET budget = budget + ? WHERE user_id = ?",
                (value, user_id),
            )
            new_budget = conn.execute(
                "SELECT budget FROM users WHERE user_id = ?", (user_id,)
            ).fetchone()[0]
        logger.info(f"User {user_id} sold player {player_id} for {value}")
        return new_budget

    def get_team_rosters(self):
        """Every team with its owner and the raw rows of its players."""
        with self._read() as conn:
            teams = conn.execute(
                """SELECT t.team_id, t.team_name, t.user_id, u.username
                   FROM teams t JOIN users u ON u.user_id = t.user_id
                   ORDER BY t.team_id"""
            ).fetchall()
            members = conn.execute(
                """SELECT tp.team_id, p.* FROM team_players tp
                   JOIN players p ON p.player_id = tp.player_id"""
            ).fetchall()

        rosters = {t["team_id"]: {"team": t, "players": []} for t in teams}
        for row in members:
            if row["team_id"] in rosters:
                rosters[row["team_id"]]["players"].append(row)
        return list(rosters.values())

    def save_team_totals(self, totals):
        """Persist recomputed ranking scores: {team_id: total_points}."""
        with self._transaction() as conn:
            conn.executemany(
                "UPDATE teams SET total_points = ? WHERE team_id = ?",
                [(total, team_id) for team_id, total in totals.items()],
            )
