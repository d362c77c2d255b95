import logging
from typing import Dict, Iterable, List, Optional

import library_catalog.database as database
from library_catalog.book import Book
from library_catalog.database import get_db_connection, initialize_database
from library_catalog.interfaces import BookRepository

logger = logging.getLogger(__name__)


class SqliteBookRepository(BookRepository):
    """Books table in the catalog SQLite database."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file or database.DATABASE_FILE
        initialize_database(self.db_file)

    def find_book(self, title: str) -> Optional[Book]:
        if title is None:
            return None
        conn = get_db_connection(self.db_file)
        try:
            row = conn.execute(
                "SELECT title, copies FROM books WHERE title = ?", (title.strip(),)
            ).fetchone()
            return Book.from_dict(dict(row)) if row else None
        finally:
            conn.close()

    def get_all_books(self) -> List[Book]:
        conn = get_db_connection(self.db_file)
        try:
            rows = conn.execute("SELECT title, copies FROM books ORDER BY rowid").fetchall()
            return [Book.from_dict(dict(row)) for row in rows]
        finally:
            conn.close()

    def save_book(self, book: Book) -> None:
        conn = get_db_connection(self.db_file)
        try:
            conn.execute(
                """
                INSERT INTO books (title, copies) VALUES (?, ?)
                ON CONFLICT(title) DO UPDATE SET copies = excluded.copies, updated_at = CURRENT_TIMESTAMP
                """,
                (book.title, book.copies),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Saved %r", book)


class InMemoryBookRepository(BookRepository):
    """Dict-backed catalog; keeps the very instances it is given."""

    def __init__(self, books: Optional[Iterable[Book]] = None) -> None:
        self._books: Dict[str, Book] = {}
        for book in books or []:
            self._books[book.title] = book

    def find_book(self, title: str) -> Optional[Book]:
        if title is None:
            return None
        return self._books.get(title.strip())

    def get_all_books(self) -> List[Book]:
        return list(self._books.values())

    def save_book(self, book: Book) -> None:
        self._books[book.title] = book
