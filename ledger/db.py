import sqlite3
from pathlib import Path

from .settings import Settings


def connect(db_path: str | Path):
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    with connect(settings.db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS snapshots (
              key TEXT PRIMARY KEY,
              value TEXT NOT NULL,
              created_at TEXT NOT NULL DEFAULT (datetime('now')),
              updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
            """
        )
        conn.execute(
            """
            CREATE TRIGGER IF NOT EXISTS snapshots_updated_at
            AFTER UPDATE OF value ON snapshots
            FOR EACH ROW
            BEGIN
              UPDATE snapshots SET updated_at = datetime('now') WHERE key = OLD.key;
            END;
            """
        )


def read_snapshot(db_path, key: str) -> str | None:
    with connect(db_path) as conn:
        row = conn.execute(
            "SELECT value FROM snapshots WHERE key = ?",
            (key,),
        ).fetchone()
    return None if row is None else row["value"]


def write_snapshot(db_path, key: str, value: str) -> None:
    with connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO snapshots(key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value),
        )
