"""sqlite persistence for named planner parameter sets."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from loguru import logger

from first_million.domain.planner import GoalInputs


class ScenarioNotFoundError(KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


class ScenarioStore:
    """Saves and loads :class:`GoalInputs` by name. Only parameters are stored."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                create table if not exists saved_scenarios (
                    name text primary key,
                    payload text not null,
                    updated_at text not null
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def save(self, name: str, inputs: GoalInputs) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                insert into saved_scenarios (name, payload, updated_at)
                values (?, ?, ?)
                on conflict(name) do update set
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (
                    name,
                    inputs.model_dump_json(by_alias=True),
                    datetime.now(timezone.utc).isoformat(timespec="seconds"),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info(f"Saved scenario '{name}' to {self.db_path}")

    def load(self, name: str) -> GoalInputs:
        conn = self._connect()
        try:
            row = conn.execute(
                "select payload from saved_scenarios where name = ?",
                (name,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise ScenarioNotFoundError(name)
        return GoalInputs.model_validate_json(row["payload"])

    def list_names(self) -> List[str]:
        conn = self._connect()
        try:
            rows = conn.execute("select name from saved_scenarios order by name").fetchall()
        finally:
            conn.close()
        return [row["name"] for row in rows]

    def delete(self, name: str) -> None:
        conn = self._connect()
        try:
            cursor = conn.execute("delete from saved_scenarios where name = ?", (name,))
            conn.commit()
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise ScenarioNotFoundError(name)
        logger.info(f"Deleted scenario '{name}'")
