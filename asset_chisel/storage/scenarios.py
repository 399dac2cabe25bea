"""Saved scenarios: sqlite-backed store plus JSON import/export."""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from asset_chisel.log import get_logger
from asset_chisel.schemas.scenario import Scenario

logger = get_logger(__name__)

CURRENT_SCENARIO_KEY = "current-scenario"
DEFAULT_SCENARIO_NAME = "New scenario"
IMPORTED_SCENARIO_NAME = "Imported scenario"


class ScenarioError(Exception):
    """Base class for scenario persistence failures."""


class InvalidScenarioFormat(ScenarioError):
    """Raised when an imported document is not a scenario."""

    def __init__(self, reason: str):
        super().__init__(f"invalid scenario format: {reason}")
        self.reason = reason


class ScenarioNotFound(ScenarioError):
    def __init__(self, scenario_id: str):
        super().__init__(f"scenario {scenario_id!r} not found")
        self.scenario_id = scenario_id


class ScenarioStorageError(ScenarioError):
    """Raised when the underlying database fails."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return uuid.uuid4().hex


def default_scenario_data() -> Dict[str, Any]:
    """Starter parameter set: plain cash plus a capped tax-advantaged fund."""
    return {
        "simulationYears": 30,
        "assets": [
            {
                "id": 1,
                "name": "Cash savings",
                "initialAmount": 1000000,
                "returnRates": [{"id": 1, "startYear": 1, "endYear": 30, "ratePercent": 0}],
                "contributions": [],
                "events": [],
                "cap": {"enabled": False, "limit": 0},
            },
            {
                "id": 2,
                "name": "Tax-advantaged fund",
                "initialAmount": 0,
                "returnRates": [{"id": 1, "startYear": 1, "endYear": 30, "ratePercent": 5}],
                "contributions": [
                    {"id": 1, "name": "Monthly plan", "startYear": 1, "endYear": 30, "monthlyAmount": 50000},
                ],
                "events": [],
                "cap": {"enabled": True, "limit": 18000000},
            },
        ],
    }


def export_scenario(scenario: Scenario, today: Optional[date] = None) -> Tuple[str, str]:
    """Return ``(filename, json_text)`` for a downloadable copy of ``scenario``."""
    today = today or _utcnow().date()
    filename = f"{scenario.name}_{today.isoformat()}.json"
    text = json.dumps(scenario.model_dump(), indent=2, ensure_ascii=False)
    return filename, text


def import_scenario(
    text: str,
    clock: Callable[[], datetime] = _utcnow,
    id_factory: Callable[[], str] = _new_id,
) -> Scenario:
    """
    Parse an exported scenario into a new, unsaved scenario.

    The copy gets a fresh id and timestamps so it never collides with the
    original. Anything that is not a JSON object with an object ``data`` field
    raises InvalidScenarioFormat.
    """
    try:
        imported = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise InvalidScenarioFormat("not valid JSON") from exc

    if not isinstance(imported, dict):
        raise InvalidScenarioFormat("expected a JSON object")
    data = imported.get("data")
    if not isinstance(data, dict):
        raise InvalidScenarioFormat("missing scenario data")

    name = imported.get("name")
    now = _timestamp(clock())
    return Scenario(
        id=id_factory(),
        name=f"{name} (imported)" if isinstance(name, str) and name else IMPORTED_SCENARIO_NAME,
        data=data,
        createdAt=now,
        updatedAt=now,
    )


class ScenarioStore:
    """
    Scenarios kept in a small sqlite database.

    Scenario data is stored as JSON text and handed back unchanged; list order
    is insertion order. The id of the "current" scenario lives in a meta table.
    """

    def __init__(
        self,
        db_path: str,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.db_path = db_path
        self._clock = clock
        self._id_factory = id_factory
        # an in-memory database only lives as long as its connection
        self._shared: Optional[sqlite3.Connection] = None
        if db_path == ":memory:":
            self._shared = sqlite3.connect(db_path, check_same_thread=False)
            self._shared.row_factory = sqlite3.Row
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        if self._shared is not None:
            return self._shared
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _release(self, conn: sqlite3.Connection) -> None:
        if conn is not self._shared:
            conn.close()

    def _run(self, operation: str, work: Callable[[sqlite3.Connection], Any]) -> Any:
        conn = self._connect()
        try:
            result = work(conn)
            conn.commit()
            return result
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("scenario storage failed during %s: %s", operation, exc)
            raise ScenarioStorageError(f"failed to {operation}") from exc
        finally:
            self._release(conn)

    def init_db(self) -> None:
        def work(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                create table if not exists scenarios (
                    seq integer primary key autoincrement,
                    id text not null unique,
                    name text not null,
                    data text not null,
                    created_at text not null,
                    updated_at text not null
                )
                """
            )
            conn.execute(
                """
                create table if not exists meta (
                    key text primary key,
                    value text not null
                )
                """
            )

        self._run("initialise database", work)

    # -----------------------------
    # scenarios
    # -----------------------------

    def create(self, name: str, data: Dict[str, Any]) -> Scenario:
        """Build a new scenario; it is not stored until ``save``."""
        now = _timestamp(self._clock())
        return Scenario(id=self._id_factory(), name=name, data=data, createdAt=now, updatedAt=now)

    def create_default(self, data: Optional[Dict[str, Any]] = None) -> Scenario:
        return self.create(DEFAULT_SCENARIO_NAME, data if data is not None else default_scenario_data())

    def list(self) -> List[Scenario]:
        rows = self._run(
            "load scenarios",
            lambda conn: conn.execute(
                "select id, name, data, created_at, updated_at from scenarios order by seq"
            ).fetchall(),
        )
        return [_row_to_scenario(row) for row in rows]

    def get(self, scenario_id: str) -> Optional[Scenario]:
        row = self._run(
            "load scenario",
            lambda conn: conn.execute(
                "select id, name, data, created_at, updated_at from scenarios where id = ?",
                (scenario_id,),
            ).fetchone(),
        )
        return _row_to_scenario(row) if row is not None else None

    def save(self, scenario: Scenario) -> Scenario:
        """Insert or overwrite by id, refresh ``updatedAt`` and make it current."""
        saved = scenario.model_copy(update={"updatedAt": _timestamp(self._clock())})

        def work(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                insert into scenarios (id, name, data, created_at, updated_at)
                values (?, ?, ?, ?, ?)
                on conflict(id) do update set
                    name = excluded.name,
                    data = excluded.data,
                    created_at = excluded.created_at,
                    updated_at = excluded.updated_at
                """,
                (saved.id, saved.name, json.dumps(saved.data), saved.createdAt, saved.updatedAt),
            )
            _set_meta(conn, CURRENT_SCENARIO_KEY, saved.id)

        self._run("save scenario", work)
        logger.info("saved scenario id=%s name=%s", saved.id, saved.name)
        return saved

    def delete(self, scenario_id: str) -> List[Scenario]:
        """
        Remove a scenario and return the ones left.

        Deleting the current scenario moves "current" to the first remaining
        one, or clears it when none remain.
        """

        def work(conn: sqlite3.Connection) -> bool:
            cursor = conn.execute("delete from scenarios where id = ?", (scenario_id,))
            if cursor.rowcount == 0:
                return False
            if _get_meta(conn, CURRENT_SCENARIO_KEY) == scenario_id:
                first = conn.execute("select id from scenarios order by seq limit 1").fetchone()
                if first is not None:
                    _set_meta(conn, CURRENT_SCENARIO_KEY, first["id"])
                else:
                    conn.execute("delete from meta where key = ?", (CURRENT_SCENARIO_KEY,))
            return True

        if not self._run("delete scenario", work):
            raise ScenarioNotFound(scenario_id)
        logger.info("deleted scenario id=%s", scenario_id)
        return self.list()

    def clear(self) -> None:
        def work(conn: sqlite3.Connection) -> None:
            conn.execute("delete from scenarios")
            conn.execute("delete from meta where key = ?", (CURRENT_SCENARIO_KEY,))

        self._run("clear scenarios", work)
        logger.info("cleared all scenarios")

    # -----------------------------
    # current scenario
    # -----------------------------

    def current_id(self) -> Optional[str]:
        return self._run("load current scenario", lambda conn: _get_meta(conn, CURRENT_SCENARIO_KEY))

    def set_current_id(self, scenario_id: str) -> None:
        self._run(
            "set current scenario",
            lambda conn: _set_meta(conn, CURRENT_SCENARIO_KEY, scenario_id),
        )


def _row_to_scenario(row: sqlite3.Row) -> Scenario:
    return Scenario(
        id=row["id"],
        name=row["name"],
        data=json.loads(row["data"]),
        createdAt=row["created_at"],
        updatedAt=row["updated_at"],
    )


def _get_meta(conn: sqlite3.Connection, key: str) -> Optional[str]:
    row = conn.execute("select value from meta where key = ?", (key,)).fetchone()
    return row["value"] if row is not None else None


def _set_meta(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "insert into meta (key, value) values (?, ?) on conflict(key) do update set value = excluded.value",
        (key, value),
    )
