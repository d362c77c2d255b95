import sqlite3
from unittest.mock import MagicMock

import pytest

from library_catalog.book import Book
from library_catalog.library_service import InvalidOperationError, LibraryService
from library_catalog.repositories import InMemoryBookRepository


@pytest.mark.parametrize("title, copies", [
    (None, 5),
    ("Valid Title", 0),
    ("   ", 3),
    ("Another Title", -1),
    ("", 1),
    ("Valid Title", True),
    ("Valid Title", 2.5),
])
def test_add_book_invalid_input_raises(service, repo_mock, member_mock, title, copies):
    with pytest.raises(ValueError):
        service.add_book(title, copies)

    repo_mock.find_book.assert_not_called()
    repo_mock.save_book.assert_not_called()
    member_mock.is_valid_member.assert_not_called()


def test_add_book_creates_new_book(service, repo_mock, notif_mock):
    repo_mock.find_book.return_value = None

    service.add_book("The little prince", 5)

    repo_mock.find_book.assert_called_once_with("The little prince")
    repo_mock.save_book.assert_called_once()
    saved = repo_mock.save_book.call_args.args[0]
    assert saved.title == "The little prince"
    assert saved.copies == 5
    notif_mock.notify_borrow.assert_not_called()
    notif_mock.notify_return.assert_not_called()


def test_add_book_updates_existing_copies(service, repo_mock):
    existing = Book("Atomic Habits", 7)
    repo_mock.find_book.return_value = existing

    service.add_book("Atomic Habits", 3)

    assert existing.copies == 10
    repo_mock.save_book.assert_called_once_with(existing)
    assert repo_mock.save_book.call_args.args[0] is existing


def test_add_book_repeated_calls_accumulate():
    repo = InMemoryBookRepository([Book("Aeneid", 2)])
    service = LibraryService(repo, None, None)

    for _ in range(4):
        service.add_book("Aeneid", 3)

    assert repo.find_book("Aeneid").copies == 2 + 4 * 3
    assert len(repo.get_all_books()) == 1


def test_borrow_book_success(service, repo_mock, member_mock, notif_mock):
    book = Book("Aeneid", 5)
    repo_mock.find_book.return_value = book
    member_mock.is_valid_member.return_value = True

    result = service.borrow_book(1, "Aeneid")

    assert result is True
    assert book.copies == 4
    repo_mock.save_book.assert_called_once_with(book)
    notif_mock.notify_borrow.assert_called_once_with(1, "Aeneid")
    member_mock.is_valid_member.assert_called_once_with(1)


def test_borrow_book_not_available_returns_false(service, repo_mock, member_mock, notif_mock):
    book = Book("Aeneid", 0)
    repo_mock.find_book.return_value = book
    member_mock.is_valid_member.return_value = True

    assert service.borrow_book(1, "Aeneid") is False

    assert book.copies == 0
    repo_mock.save_book.assert_not_called()
    notif_mock.notify_borrow.assert_not_called()


def test_borrow_book_not_found_returns_false(service, repo_mock, member_mock, notif_mock):
    member_mock.is_valid_member.return_value = True
    repo_mock.find_book.return_value = None

    assert service.borrow_book(1, "Aeneid") is False

    repo_mock.save_book.assert_not_called()
    notif_mock.notify_borrow.assert_not_called()


def test_borrow_book_invalid_member_raises(service, repo_mock, member_mock, notif_mock):
    member_mock.is_valid_member.return_value = False

    with pytest.raises(InvalidOperationError):
        service.borrow_book(99, "Aeneid")

    member_mock.is_valid_member.assert_called_once_with(99)
    repo_mock.find_book.assert_not_called()
    repo_mock.save_book.assert_not_called()
    notif_mock.notify_borrow.assert_not_called()


def test_borrow_book_notifier_error_propagates(service, repo_mock, member_mock, notif_mock):
    repo_mock.find_book.return_value = Book("Aeneid", 1)
    member_mock.is_valid_member.return_value = True
    notif_mock.notify_borrow.side_effect = RuntimeError("smtp down")

    with pytest.raises(RuntimeError, match="smtp down"):
        service.borrow_book(1, "Aeneid")


def test_return_book_success(service, repo_mock, member_mock, notif_mock):
    book = Book("Atomic Habits", 3)
    repo_mock.find_book.return_value = book

    assert service.return_book(1, "Atomic Habits") is True

    assert book.copies == 4
    repo_mock.save_book.assert_called_once_with(book)
    notif_mock.notify_return.assert_called_once_with(1, "Atomic Habits")
    member_mock.is_valid_member.assert_not_called()


def test_return_book_not_found_returns_false(service, repo_mock, notif_mock):
    repo_mock.find_book.return_value = None

    assert service.return_book(1, "Atomic Habits") is False

    repo_mock.save_book.assert_not_called()
    notif_mock.notify_return.assert_not_called()


def test_get_available_books_mixed(service, repo_mock):
    repo_mock.get_all_books.return_value = [
        Book("The little prince", 0),
        Book("Aeneid", 1),
        Book("Atomic Habits", 3),
    ]

    result = service.get_available_books()

    assert result is not None
    assert [b.title for b in result] == ["Aeneid", "Atomic Habits"]


def test_get_available_books_none_available(service, repo_mock):
    repo_mock.get_all_books.return_value = [Book("Aeneid", 0), Book("Atomic Habits", 0)]

    assert service.get_available_books() == []


def test_get_available_books_empty_catalog(service, repo_mock):
    repo_mock.get_all_books.return_value = []

    assert service.get_available_books() == []


def test_add_book_repository_error_propagates(service, repo_mock):
    repo_mock.find_book.return_value = None
    repo_mock.save_book.side_effect = sqlite3.OperationalError("database is locked")

    with pytest.raises(sqlite3.OperationalError, match="database is locked"):
        service.add_book("Aeneid", 1)


def test_borrow_book_repository_error_propagates(service, repo_mock, member_mock, notif_mock):
    repo_mock.find_book.return_value = Book("Aeneid", 1)
    member_mock.is_valid_member.return_value = True
    repo_mock.save_book.side_effect = sqlite3.OperationalError("disk I/O error")

    with pytest.raises(sqlite3.OperationalError):
        service.borrow_book(1, "Aeneid")

    notif_mock.notify_borrow.assert_not_called()


def test_close_releases_collaborators():
    repo, members, notifier = MagicMock(), MagicMock(), MagicMock()

    LibraryService(repo, members, notifier).close()

    repo.close.assert_called_once_with()
    members.close.assert_called_once_with()
    notifier.close.assert_called_once_with()
