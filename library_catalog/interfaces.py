"""Collaborator contracts consumed by the library service."""

from abc import ABC, abstractmethod
from typing import List, Optional

from library_catalog.book import Book


class BookRepository(ABC):
    """Storage for catalog entries, keyed by title."""

    @abstractmethod
    def find_book(self, title: str) -> Optional[Book]:
        """Return the book with this title, or None."""

    @abstractmethod
    def get_all_books(self) -> List[Book]:
        """Return the whole catalog in storage order."""

    @abstractmethod
    def save_book(self, book: Book) -> None:
        """Persist the current state of ``book`` (insert or update by title)."""


class MemberValidator(ABC):
    """Answers whether a member id may borrow."""

    @abstractmethod
    def is_valid_member(self, member_id: int) -> bool:
        pass


class Notifier(ABC):
    """Receives borrow/return events after the catalog has been updated."""

    @abstractmethod
    def notify_borrow(self, member_id: int, title: str) -> None:
        pass

    @abstractmethod
    def notify_return(self, member_id: int, title: str) -> None:
        pass
