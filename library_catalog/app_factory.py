from typing import Optional

import library_catalog.database as database
from library_catalog.config import Settings, settings as default_settings
from library_catalog.interfaces import MemberValidator
from library_catalog.library_service import LibraryService
from library_catalog.members import SqliteMemberValidator, StaticMemberValidator
from library_catalog.notifications import build_notifier
from library_catalog.repositories import SqliteBookRepository


def build_member_validator(config: Settings, db_file: str) -> MemberValidator:
    if config.member_ids:
        return StaticMemberValidator(config.member_ids)
    return SqliteMemberValidator(db_file)


def build_service(db_file: Optional[str] = None, config: Optional[Settings] = None) -> LibraryService:
    """Wire a LibraryService against the SQLite catalog at ``db_file``."""
    config = config or default_settings
    db_file = db_file or database.DATABASE_FILE
    return LibraryService(
        SqliteBookRepository(db_file),
        build_member_validator(config, db_file),
        build_notifier(config, db_file),
    )
