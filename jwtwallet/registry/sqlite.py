"""SQLite implementation of the key registry."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from .base import KeyRecordExistsError, KeyRegistry
from .models import KeyRecord


class SQLiteKeyRegistry(KeyRegistry):
    """Share key records between processes on one host using SQLite."""

    def __init__(self, db_path: str | Path, timeout: float = 10):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, timeout=timeout, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS key_records (
                namespace TEXT NOT NULL,
                key_id TEXT NOT NULL,
                public_jwk TEXT NOT NULL,
                issuer TEXT NOT NULL,
                expires_on TEXT NOT NULL,
                PRIMARY KEY (namespace, key_id)
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        self._conn.commit()

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()

    @staticmethod
    def _to_record(row: sqlite3.Row) -> KeyRecord:
        return KeyRecord(
            namespace=row["namespace"],
            key_id=row["key_id"],
            public_jwk=json.loads(row["public_jwk"]),
            issuer=row["issuer"],
            expires_on=datetime.fromisoformat(row["expires_on"]),
        )

    # ------------------------------------------------------------------
    # Registry API
    async def create(self, record: KeyRecord) -> None:
        try:
            await asyncio.to_thread(
                self._execute,
                "INSERT INTO key_records (namespace, key_id, public_jwk, issuer, expires_on) VALUES (?, ?, ?, ?, ?)",
                record.namespace,
                record.key_id,
                json.dumps(record.public_jwk),
                record.issuer,
                record.expires_on.isoformat(),
            )
        except sqlite3.IntegrityError as exc:
            raise KeyRecordExistsError(record.namespace, record.key_id) from exc

    async def fetch(self, namespace: str, key_id: str) -> KeyRecord | None:
        row = await asyncio.to_thread(
            self._fetchone,
            "SELECT namespace, key_id, public_jwk, issuer, expires_on FROM key_records WHERE namespace = ? AND key_id = ?",
            namespace,
            key_id,
        )
        if not row:
            return None
        return self._to_record(row)

    async def list_records(self, namespace: str) -> list[KeyRecord]:
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT namespace, key_id, public_jwk, issuer, expires_on FROM key_records WHERE namespace = ? ORDER BY expires_on, key_id",
            namespace,
        )
        return [self._to_record(r) for r in rows]

    def close(self) -> None:
        self._conn.close()
