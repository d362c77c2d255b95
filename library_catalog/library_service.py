import logging
from typing import List

from library_catalog.book import Book
from library_catalog.interfaces import BookRepository, MemberValidator, Notifier

logger = logging.getLogger(__name__)


class LibraryService:
    """Applies the catalog rules on top of a repository, a member validator and a notifier.

    Business-level negatives (unknown title, no copies left) come back as ``False``.
    Misuse raises: ``ValueError`` for bad input to ``add_book`` and
    ``InvalidOperationError`` when an invalid member tries to borrow.
    Collaborator errors are not caught here.
    """

    def __init__(self, repository: BookRepository, members: MemberValidator, notifier: Notifier) -> None:
        self.repository = repository
        self.members = members
        self.notifier = notifier

    # ------------------------- Core operations ------------------------- #
    def add_book(self, title: str, copies: int) -> None:
        """Add ``copies`` of ``title``; copies accumulate when the title already exists."""
        if title is None or not title.strip():
            raise ValueError("Title cannot be empty.")
        # bool is an int subclass, reject it explicitly
        if isinstance(copies, bool) or not isinstance(copies, int) or copies <= 0:
            raise ValueError("Copies must be a positive integer.")

        book = self.repository.find_book(title)
        if book is None:
            book = Book(title=title, copies=copies)
            logger.info("New title added to catalog: %s (%d copies)", book.title, copies)
        else:
            book.copies += copies
            logger.info("Added %d copies of %s, now %d", copies, book.title, book.copies)
        self.repository.save_book(book)

    def borrow_book(self, member_id: int, title: str) -> bool:
        """Lend one copy of ``title`` to ``member_id``.

        Returns False when the title is unknown or has no copies left.
        """
        if not self.members.is_valid_member(member_id):
            logger.warning("Borrow rejected: member %s is not valid", member_id)
            raise InvalidOperationError(f"Member {member_id} is not allowed to borrow books.")

        book = self.repository.find_book(title)
        if book is None:
            logger.info("Borrow failed: %s is not in the catalog", title)
            return False
        if book.copies <= 0:
            logger.info("Borrow failed: no copies of %s available", title)
            return False

        book.copies -= 1
        self.repository.save_book(book)
        self.notifier.notify_borrow(member_id, title)
        logger.info("Member %s borrowed %s, %d copies left", member_id, title, book.copies)
        return True

    def return_book(self, member_id: int, title: str) -> bool:
        """Put one copy of ``title`` back on the shelf. Membership is not checked here."""
        book = self.repository.find_book(title)
        if book is None:
            logger.info("Return failed: %s is not in the catalog", title)
            return False

        book.copies += 1
        self.repository.save_book(book)
        self.notifier.notify_return(member_id, title)
        logger.info("Member %s returned %s, %d copies now", member_id, title, book.copies)
        return True

    def get_available_books(self) -> List[Book]:
        return [book for book in self.repository.get_all_books() if book.copies > 0]

    def close(self) -> None:
        """Release resources held by the collaborators, if they have any."""
        for collaborator in (self.repository, self.members, self.notifier):
            close = getattr(collaborator, "close", None)
            if callable(close):
                close()


class LibraryError(Exception):
    """Base class for catalog errors."""


class InvalidOperationError(LibraryError):
    """The caller is not allowed to perform the requested operation."""


class NotificationError(LibraryError):
    """A notification could not be delivered."""
