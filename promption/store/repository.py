"""SQLite-backed record store for items and agents."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Optional

from promption.errors import MissingDatabaseError, StoreError
from promption.models import Agent, AgentMode, Item, ItemKind

logger = logging.getLogger(__name__)

_ITEM_COLUMNS = "id, name, content, item_type, created_at, updated_at"
_AGENT_COLUMNS = (
    "id, name, mode, model, prompt_content, tools_config, "
    "permissions_config, created_at, updated_at"
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS items (
    id TEXT PRIMARY KEY NOT NULL,
    name TEXT NOT NULL,
    content TEXT NOT NULL,
    item_type TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_items_type ON items(item_type);
CREATE INDEX IF NOT EXISTS idx_items_name ON items(name);

CREATE TABLE IF NOT EXISTS agents (
    id TEXT PRIMARY KEY NOT NULL,
    name TEXT NOT NULL UNIQUE,
    mode TEXT NOT NULL DEFAULT 'subagent',
    model TEXT,
    prompt_content TEXT,
    tools_config TEXT,
    permissions_config TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

# Column name -> serializer for agent update payloads.
_AGENT_UPDATABLE = {
    "name": lambda value: value,
    "mode": lambda value: AgentMode(value).value,
    "model": lambda value: value,
    "prompt_content": lambda value: value,
    "tools_config": lambda value: _dump_config(value),
    "permissions_config": lambda value: _dump_config(value),
    "updated_at": lambda value: value,
}


def _dump_config(value: Optional[dict[str, Any]]) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value)


def _load_config(raw: Optional[str], column: str, record_id: str) -> Optional[dict]:
    if raw is None:
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring unparseable %s for agent %s", column, record_id)
        return None
    if not isinstance(payload, dict):
        logger.warning("Ignoring non-object %s for agent %s", column, record_id)
        return None
    return payload


def _item_from_row(row: sqlite3.Row) -> Item:
    raw_kind = row["item_type"]
    try:
        kind: ItemKind | str = ItemKind(raw_kind)
    except ValueError:
        kind = str(raw_kind)
    return Item(
        id=row["id"],
        name=row["name"],
        content=row["content"],
        kind=kind,
        created_at=row["created_at"] or "",
        updated_at=row["updated_at"] or "",
    )


def _agent_from_row(row: sqlite3.Row) -> Agent:
    try:
        mode = AgentMode(row["mode"])
    except ValueError as exc:
        raise StoreError(
            f"Agent {row['id']} has unknown mode '{row['mode']}' "
            "(expected primary or subagent)"
        ) from exc
    return Agent(
        id=row["id"],
        name=row["name"],
        mode=mode,
        model=row["model"],
        prompt_content=row["prompt_content"],
        tools=_load_config(row["tools_config"], "tools_config", row["id"]),
        permissions=_load_config(
            row["permissions_config"], "permissions_config", row["id"]
        ),
        created_at=row["created_at"] or "",
        updated_at=row["updated_at"] or "",
    )


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class RecordStore:
    def __init__(self, connection: sqlite3.Connection) -> None:
        connection.row_factory = sqlite3.Row
        self._conn = connection

    @classmethod
    def open(cls, path: Path, create: bool = False) -> "RecordStore":
        if not create and not path.exists():
            raise MissingDatabaseError(path)
        if create:
            path.parent.mkdir(parents=True, exist_ok=True)
        try:
            store = cls(sqlite3.connect(str(path)))
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open database: {exc}") from exc
        if create:
            store.ensure_schema()
        return store

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def ensure_schema(self) -> None:
        try:
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def _query(self, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def _execute(self, sql: str, params: Iterable[Any] = ()) -> int:
        try:
            with self._conn:
                cursor = self._conn.execute(sql, tuple(params))
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return cursor.rowcount

    # items

    def get_items(self, ids: list[str]) -> list[Item]:
        """Return items whose id is in ``ids``, preserving request order."""
        if not ids:
            return []
        rows = self._query(
            f"SELECT {_ITEM_COLUMNS} FROM items WHERE id IN ({_placeholders(len(ids))})",
            ids,
        )
        by_id = {row["id"]: _item_from_row(row) for row in rows}
        return [by_id[item_id] for item_id in dict.fromkeys(ids) if item_id in by_id]

    def list_items(self, kind: Optional[str] = None) -> list[Item]:
        if kind is None:
            rows = self._query(
                f"SELECT {_ITEM_COLUMNS} FROM items ORDER BY updated_at DESC"
            )
        else:
            rows = self._query(
                f"SELECT {_ITEM_COLUMNS} FROM items WHERE item_type = ? "
                "ORDER BY updated_at DESC",
                [kind],
            )
        return [_item_from_row(row) for row in rows]

    def insert_item(self, item: Item) -> None:
        self._execute(
            f"INSERT INTO items ({_ITEM_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            [
                item.id,
                item.name,
                item.content,
                item.kind_value,
                item.created_at,
                item.updated_at,
            ],
        )

    # agents

    def get_agents(self, ids: list[str]) -> list[Agent]:
        if not ids:
            return []
        rows = self._query(
            f"SELECT {_AGENT_COLUMNS} FROM agents "
            f"WHERE id IN ({_placeholders(len(ids))})",
            ids,
        )
        by_id = {row["id"]: _agent_from_row(row) for row in rows}
        return [by_id[agent_id] for agent_id in dict.fromkeys(ids) if agent_id in by_id]

    def list_agents(self) -> list[Agent]:
        rows = self._query(
            f"SELECT {_AGENT_COLUMNS} FROM agents ORDER BY updated_at DESC"
        )
        return [_agent_from_row(row) for row in rows]

    def find_agent(self, id_or_name: str) -> Optional[Agent]:
        rows = self._query(
            f"SELECT {_AGENT_COLUMNS} FROM agents WHERE id = ? OR name = ? "
            "ORDER BY CASE WHEN id = ? THEN 0 ELSE 1 END LIMIT 1",
            [id_or_name, id_or_name, id_or_name],
        )
        return _agent_from_row(rows[0]) if rows else None

    def name_exists(self, name: str, exclude_id: Optional[str] = None) -> bool:
        if exclude_id is None:
            rows = self._query("SELECT 1 FROM agents WHERE name = ?", [name])
        else:
            rows = self._query(
                "SELECT 1 FROM agents WHERE name = ? AND id != ?", [name, exclude_id]
            )
        return bool(rows)

    def insert_agent(self, agent: Agent) -> None:
        self._execute(
            f"INSERT INTO agents ({_AGENT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                agent.id,
                agent.name,
                agent.mode.value,
                agent.model,
                agent.prompt_content,
                _dump_config(agent.tools),
                _dump_config(agent.permissions),
                agent.created_at,
                agent.updated_at,
            ],
        )

    def update_agent(self, agent_id: str, fields: dict[str, Any]) -> int:
        """Update the given columns of one agent; ``None`` stores NULL."""
        unknown = set(fields) - set(_AGENT_UPDATABLE)
        if unknown:
            raise StoreError(f"Unknown agent columns: {', '.join(sorted(unknown))}")
        if not fields:
            return 0
        assignments = ", ".join(f"{column} = ?" for column in fields)
        params = [_AGENT_UPDATABLE[column](value) for column, value in fields.items()]
        params.append(agent_id)
        return self._execute(f"UPDATE agents SET {assignments} WHERE id = ?", params)

    def delete_agent(self, agent_id: str) -> int:
        return self._execute("DELETE FROM agents WHERE id = ?", [agent_id])

    def count_agents(self) -> int:
        rows = self._query("SELECT COUNT(*) AS total FROM agents")
        return int(rows[0]["total"])
