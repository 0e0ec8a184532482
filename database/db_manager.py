import logging
import os
import sqlite3

from utils.constants import DB_FILE

logger = logging.getLogger(__name__)


class DatabaseManager:
    """sqlite-backed key-value blob store.

    Each key holds one serialized collection. Writes through ``put_value`` are
    staged on the open connection and only become durable on ``commit``, so a
    caller can persist several keys as a single transaction.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema."""
        conn = self.get_connection()
        self._create_schema(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key        TEXT PRIMARY KEY,
                value      TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
        """)

    def get_value(self, key: str) -> str | None:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def has_key(self, key: str) -> bool:
        return self.get_value(key) is not None

    def put_value(self, key: str, value: str):
        """Stage a write; call commit() to make it durable."""
        conn = self.get_connection()
        conn.execute(
            """INSERT INTO kv_store(key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE
               SET value = excluded.value, updated_at = datetime('now')""",
            (key, value),
        )

    def commit(self):
        self.get_connection().commit()

    def rollback(self):
        self.get_connection().rollback()

    @staticmethod
    def open_in_folder(data_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the ledger DB.

        data_folder: if provided, the DB file lives in that directory instead of CWD.
        """
        if data_folder:
            os.makedirs(data_folder, exist_ok=True)
            path = os.path.join(data_folder, DB_FILE)
        else:
            path = DB_FILE
        logger.debug("Opening ledger database at %s", path)
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
