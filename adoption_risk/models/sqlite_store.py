# adoption_risk/models/sqlite_store.py
"""
SQLite-backed alert persistence.

Provides async CRUD operations with WAL mode and IMMEDIATE transactions.
Updates write whole columns (mitigation steps are one JSON column), so
concurrent updates to the same alert are last-write-wins.
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import aiosqlite

from adoption_risk.errors import AlertNotFound
from adoption_risk.models.schema import init_db
from adoption_risk.models.store import (
    FILTERABLE_FIELDS,
    UPDATABLE_FIELDS,
    AlertStore,
    check_fields,
)
from adoption_risk.monitoring.alerts import AlertSeverity, AlertStatus, RiskAlert
from adoption_risk.monitoring.mitigation import MitigationStep

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id",
    "risk_category",
    "risk_description",
    "trigger_reason",
    "potential_impact",
    "risk_score",
    "severity",
    "status",
    "mitigation_steps",
    "source_type",
    "source_id",
    "source_name",
    "acknowledged_by",
    "resolved_at",
    "created_at",
    "updated_at",
)


def _to_column(key: str, value: Any) -> Any:
    """Serialize a RiskAlert field value for storage."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if key == "mitigation_steps":
        return json.dumps([step.to_dict() for step in value or []])
    return value


class SQLiteAlertStore(AlertStore):
    """
    Async SQLite-backed alert storage.

    Features:
        - WAL mode for concurrent reads/writes
        - IMMEDIATE transactions for write safety
        - No persistent connections (avoids resource leaks)
    """

    def __init__(self, db_path: str) -> None:
        """
        Initialize SQLite alert store.

        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path
        logger.info(f"Created SQLiteAlertStore with path: {db_path}")

    async def initialize(self) -> None:
        """Create the schema if needed."""
        await init_db(self._db_path)

    async def add(self, alert: RiskAlert) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute("SELECT id FROM alerts WHERE id = ?", (alert.id,))
                if await cursor.fetchone():
                    raise ValueError(f"Alert {alert.id} already exists")

                values = [_to_column(col, getattr(alert, col)) for col in _COLUMNS]
                if values[-1] is None:
                    values[-1] = datetime.now(timezone.utc).isoformat()

                placeholders = ", ".join("?" for _ in _COLUMNS)
                await db.execute(
                    f"INSERT INTO alerts ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                    values,
                )

                await db.commit()
                logger.info(f"Added alert {alert.id} to SQLite store")

            except Exception:
                await db.rollback()
                raise

    async def get(self, alert_id: str) -> RiskAlert | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM alerts WHERE id = ?", (alert_id,))
            row = await cursor.fetchone()

            if not row:
                return None

            return self._row_to_alert(row)

    async def list_all(self) -> list[RiskAlert]:
        return await self.filter()

    async def update(self, alert_id: str, **fields: Any) -> None:
        check_fields(fields, UPDATABLE_FIELDS, "update")

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                cursor = await db.execute("SELECT id FROM alerts WHERE id = ?", (alert_id,))
                if not await cursor.fetchone():
                    raise AlertNotFound(alert_id)

                if not fields:
                    await db.rollback()
                    return

                set_parts = []
                values = []
                for key, value in fields.items():
                    set_parts.append(f"{key} = ?")
                    values.append(_to_column(key, value))

                # Always update updated_at
                if "updated_at" not in fields:
                    set_parts.append("updated_at = ?")
                    values.append(datetime.now(timezone.utc).isoformat())

                values.append(alert_id)

                sql = f"UPDATE alerts SET {', '.join(set_parts)} WHERE id = ?"
                await db.execute(sql, values)

                await db.commit()
                logger.info(f"Updated alert {alert_id}: {sorted(fields)}")

            except Exception:
                await db.rollback()
                raise

    async def filter(self, **predicates: Any) -> list[RiskAlert]:
        check_fields(predicates, FILTERABLE_FIELDS, "filter")

        sql = "SELECT * FROM alerts"
        values = []
        if predicates:
            clauses = []
            for key, value in predicates.items():
                if value is None:
                    clauses.append(f"{key} IS NULL")
                else:
                    clauses.append(f"{key} = ?")
                    values.append(_to_column(key, value))
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC"

        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(sql, values)
            rows = await cursor.fetchall()

            return [self._row_to_alert(row) for row in rows]

    async def close(self) -> None:
        """
        Checkpoint WAL.

        Truncates WAL file to avoid unbounded growth.
        """
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA wal_checkpoint(TRUNCATE)")
                logger.info("WAL checkpoint completed")
        except aiosqlite.Error as e:
            logger.warning(f"WAL checkpoint failed: {e}")

    def _row_to_alert(self, row: aiosqlite.Row) -> RiskAlert:
        """Convert SQLite row to RiskAlert."""
        steps = json.loads(row["mitigation_steps"]) if row["mitigation_steps"] else []
        return RiskAlert(
            id=row["id"],
            risk_category=row["risk_category"],
            risk_description=row["risk_description"],
            trigger_reason=row["trigger_reason"] or "",
            potential_impact=row["potential_impact"] or "",
            risk_score=row["risk_score"],
            severity=AlertSeverity(row["severity"]),
            status=AlertStatus(row["status"]),
            mitigation_steps=[MitigationStep.from_dict(step) for step in steps],
            source_type=row["source_type"],
            source_id=row["source_id"],
            source_name=row["source_name"],
            acknowledged_by=row["acknowledged_by"],
            resolved_at=datetime.fromisoformat(row["resolved_at"])
            if row["resolved_at"]
            else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"])
            if row["updated_at"]
            else None,
        )
