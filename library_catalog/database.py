import logging
import sqlite3
from typing import Optional

from library_catalog.config import settings

logger = logging.getLogger(__name__)

# Default database file (LIBRARY_DB_FILE, see config.Settings.data_file)
DATABASE_FILE = settings.data_file


def get_db_connection(db_file: Optional[str] = None) -> sqlite3.Connection:
    """Open a connection to the catalog database.

    Callers own the connection and must close it. ``db_file`` overrides the
    module-level ``DATABASE_FILE`` so repositories can be pointed at their own file.
    """
    conn = sqlite3.connect(db_file or DATABASE_FILE)
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(db_file: Optional[str] = None) -> None:
    """Create the catalog tables if they do not exist yet."""
    conn = get_db_connection(db_file)
    try:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS books (
                title TEXT PRIMARY KEY,
                copies INTEGER NOT NULL CHECK(copies >= 0),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS members (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                active INTEGER NOT NULL DEFAULT 1,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Borrow/return event log
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS notifications (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                member_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                kind TEXT NOT NULL CHECK(kind IN ('borrow', 'return')),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_books_copies ON books(copies)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_notifications_member ON notifications(member_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_notifications_created_at ON notifications(created_at DESC)")
        conn.commit()
    finally:
        conn.close()


def initialize_database(db_file: Optional[str] = None) -> None:
    """Initialize the database, creating tables when needed."""
    create_tables(db_file)
    logger.debug("Database initialized at %s", db_file or DATABASE_FILE)
