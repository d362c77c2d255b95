from unittest.mock import MagicMock

import pytest

import library_catalog.database as database
from library_catalog.interfaces import BookRepository, MemberValidator, Notifier
from library_catalog.library_service import LibraryService


@pytest.fixture
def db_file(tmp_path, request, monkeypatch):
    # A unique database file per test, also used as the module-level default
    path = str(tmp_path / f"test_{request.node.name}.db")
    monkeypatch.setattr(database, "DATABASE_FILE", path)
    return path


@pytest.fixture
def repo_mock():
    return MagicMock(spec=BookRepository)


@pytest.fixture
def member_mock():
    return MagicMock(spec=MemberValidator)


@pytest.fixture
def notif_mock():
    return MagicMock(spec=Notifier)


@pytest.fixture
def service(repo_mock, member_mock, notif_mock):
    return LibraryService(repo_mock, member_mock, notif_mock)
