# adoption_risk/models/schema.py
"""
Database schema definition for SQLite alert persistence.

Provides DDL for tables, indexes, and schema initialization.
"""

import logging

import aiosqlite

logger = logging.getLogger(__name__)

# Schema version for future migrations
SCHEMA_VERSION = 1

ALERTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS alerts (
    id TEXT PRIMARY KEY,
    risk_category TEXT NOT NULL,
    risk_description TEXT NOT NULL,
    trigger_reason TEXT DEFAULT '',
    potential_impact TEXT DEFAULT '',
    risk_score INTEGER NOT NULL CHECK(risk_score >= 0 AND risk_score <= 100),
    severity TEXT NOT NULL CHECK(severity IN ('low', 'medium', 'high', 'critical')),
    status TEXT NOT NULL CHECK(status IN ('new', 'acknowledged', 'in_progress', 'resolved', 'dismissed')),
    mitigation_steps TEXT,
    source_type TEXT,
    source_id TEXT,
    source_name TEXT,
    acknowledged_by TEXT,
    resolved_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

# Dashboard reads are per source and split by status
ALERTS_SOURCE_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_alerts_source ON alerts(source_type, source_id)"
)
ALERTS_STATUS_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_alerts_status_created ON alerts(status, created_at)"
)


async def _get_schema_version(db: aiosqlite.Connection) -> int:
    """
    Get current schema version from database.

    Returns:
        Schema version (0 if no version table exists)
    """
    try:
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        return row[0] if row else 0
    except aiosqlite.OperationalError:
        return 0


async def _set_schema_version(db: aiosqlite.Connection, version: int) -> None:
    await db.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER)")
    await db.execute("DELETE FROM schema_version")
    await db.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))


async def init_db(db_path: str) -> None:
    """
    Initialize database schema with WAL mode and optimal settings.

    Args:
        db_path: Path to SQLite database file

    Settings:
        - WAL mode: Concurrent reads + writes
        - synchronous=NORMAL: Good durability/performance balance
        - busy_timeout=5000ms: Retry on SQLITE_BUSY
    """
    async with aiosqlite.connect(db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.execute("PRAGMA synchronous=NORMAL")
        await db.execute("PRAGMA busy_timeout=5000")

        await db.execute(ALERTS_TABLE_SQL)
        await db.execute(ALERTS_SOURCE_INDEX_SQL)
        await db.execute(ALERTS_STATUS_INDEX_SQL)

        current_version = await _get_schema_version(db)
        if current_version < SCHEMA_VERSION:
            await _set_schema_version(db, SCHEMA_VERSION)
            logger.info(f"New database initialized at v{SCHEMA_VERSION}")
        elif current_version > SCHEMA_VERSION:
            raise RuntimeError(
                f"Database {db_path} has schema v{current_version}, "
                f"newer than supported v{SCHEMA_VERSION}"
            )

        await db.commit()

        logger.info(f"Initialized database at {db_path} (schema v{SCHEMA_VERSION})")
