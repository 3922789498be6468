"""SQLite storage for partners and transactions."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

SCHEMA = """
CREATE TABLE IF NOT EXISTS partners (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE COLLATE NOCASE,
    equity TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    description TEXT NOT NULL,
    amount TEXT NOT NULL,
    transaction_type TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'Pending',
    paid_by TEXT NOT NULL DEFAULT '',
    received_by TEXT DEFAULT '',
    amount_settled TEXT DEFAULT NULL,
    notes TEXT DEFAULT '',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_transactions_type ON transactions(transaction_type);
CREATE INDEX IF NOT EXISTS idx_transactions_created ON transactions(created_at);
"""

DB_FILENAME = "ledger.db"


class Database:
    """One SQLite connection plus the single-writer transaction scope."""

    def __init__(self, db_path: str = DB_FILENAME):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._in_transaction: bool = False

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def initialize(self):
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    @contextmanager
    def transaction(self):
        """Commit everything inside the block at once, or nothing.

        Re-entrant: a nested block joins the outer one, and only the
        outermost block commits or rolls back.
        """
        if self._in_transaction:
            yield
            return
        self._in_transaction = True
        try:
            yield
            self.conn.commit()
        except BaseException:
            self.conn.rollback()
            raise
        finally:
            self._in_transaction = False

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None


# Process-wide database, opened lazily by get_db()
_db: Database | None = None


def _find_project_root() -> Path:
    """The nearest parent directory holding pyproject.toml, else the cwd."""
    here = Path(__file__).resolve()
    for parent in list(here.parents)[:10]:
        if (parent / "pyproject.toml").exists():
            return parent
    return Path.cwd()


def _open(path: Path) -> Database:
    path.parent.mkdir(parents=True, exist_ok=True)
    db = Database(str(path))
    db.initialize()
    return db


def get_db() -> Database:
    global _db
    if _db is None:
        _db = _open(_find_project_root() / DB_FILENAME)
    return _db


def set_db_path(path: str):
    global _db
    if _db:
        _db.close()
    _db = _open(Path(path))
