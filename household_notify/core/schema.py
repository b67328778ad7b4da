"""SQLite schema management (code-first approach)."""

import logging

from household_notify.core.db_client import get_connection


logger = logging.getLogger(__name__)


# Central list of all tables in the schema
COLLECTIONS = [
    "households",
    "users",
    "push_endpoints",
]

TABLE_SCHEMAS: dict[str, str] = {
    # members holds the raw JSON membership exactly as clients wrote it
    # (a list of ids, possibly with holes, or an object keyed by user id)
    "households": """
        CREATE TABLE IF NOT EXISTS households (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL DEFAULT '',
            members TEXT NOT NULL DEFAULT '[]'
        )
    """,
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT,
            display_name TEXT,
            username TEXT
        )
    """,
    "push_endpoints": """
        CREATE TABLE IF NOT EXISTS push_endpoints (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            token TEXT NOT NULL,
            platform TEXT,
            created TEXT NOT NULL,
            UNIQUE (user_id, token)
        )
    """,
}

INDEXES: list[str] = [
    "CREATE INDEX IF NOT EXISTS idx_push_endpoints_user ON push_endpoints (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_push_endpoints_token ON push_endpoints (token)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they do not exist yet."""
    conn = await get_connection(db_path=db_path)

    for name in COLLECTIONS:
        await conn.execute(TABLE_SCHEMAS[name])
        logger.debug("Ensured table exists", extra={"table": name})

    for statement in INDEXES:
        await conn.execute(statement)

    await conn.commit()
    logger.info("Schema initialized", extra={"tables": len(COLLECTIONS), "indexes": len(INDEXES)})
