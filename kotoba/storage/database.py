"""Read-only access to the SQLite dictionary database."""

import json
import sqlite3
import threading
from pathlib import Path

from ..config import DICT_DB_PATH

# Array columns (priorities, meaning, readings, kun_dicts) hold JSON arrays
SCHEMA = """
    CREATE TABLE IF NOT EXISTS dict (
        id INTEGER PRIMARY KEY,
        sequence INTEGER NOT NULL,
        reading TEXT NOT NULL,
        kanji INTEGER NOT NULL DEFAULT 0,
        is_main INTEGER NOT NULL DEFAULT 0,
        priorities TEXT,
        jlpt_lvl INTEGER
    );

    CREATE INDEX IF NOT EXISTS idx_dict_sequence ON dict(sequence);
    CREATE INDEX IF NOT EXISTS idx_dict_reading ON dict(reading);

    CREATE TABLE IF NOT EXISTS kanji (
        id INTEGER PRIMARY KEY,
        literal TEXT NOT NULL UNIQUE,
        meaning TEXT,
        grade INTEGER,
        stroke_count INTEGER NOT NULL DEFAULT 0,
        frequency INTEGER,
        jlpt INTEGER,
        onyomi TEXT,
        kunyomi TEXT,
        kun_dicts TEXT
    );
"""


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the dictionary tables. Used by import tooling and tests."""
    conn.executescript(SCHEMA)
    conn.commit()


def json_list(value: str | None) -> list:
    """Decode a JSON array column; NULL becomes an empty list."""
    if not value:
        return []
    return json.loads(value)


class ReadOnlyDatabase:
    """Opens the database read-only, one connection per thread."""

    REQUIRED_TABLES: set[str] = set()

    def __init__(self, db_path: Path | None = None):
        self.db_path = Path(db_path or DICT_DB_PATH)
        self._local = threading.local()

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create this thread's connection."""
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = self._open_readonly()
            self._local.conn = conn
        return conn

    def _open_readonly(self) -> sqlite3.Connection:
        """Open database in read-only mode, validate schema."""
        if not self.db_path.exists():
            raise FileNotFoundError(f"Dictionary database not found: {self.db_path}")

        uri = f"file:{self.db_path}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
        conn.row_factory = sqlite3.Row

        cursor = conn.execute("SELECT name FROM sqlite_master WHERE type IN ('table', 'view')")
        tables = {row["name"] for row in cursor}
        missing = self.REQUIRED_TABLES - tables
        if missing:
            conn.close()
            raise RuntimeError(f"Database missing required tables: {missing}")
        return conn

    def close(self) -> None:
        """Close the calling thread's connection."""
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            conn.close()
            self._local.conn = None
