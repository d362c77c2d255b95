import logging
import sqlite3
from typing import Iterable, Optional

import library_catalog.database as database
from library_catalog.database import get_db_connection, initialize_database
from library_catalog.interfaces import MemberValidator

logger = logging.getLogger(__name__)


class StaticMemberValidator(MemberValidator):
    """Fixed allow-list of member ids, e.g. from LIBRARY_MEMBER_IDS."""

    def __init__(self, member_ids: Iterable[int]) -> None:
        self.member_ids = frozenset(member_ids)

    def is_valid_member(self, member_id: int) -> bool:
        return member_id in self.member_ids


class SqliteMemberValidator(MemberValidator):
    """Members table: an id is valid while its row exists and is active."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file or database.DATABASE_FILE
        initialize_database(self.db_file)

    def is_valid_member(self, member_id: int) -> bool:
        conn = get_db_connection(self.db_file)
        try:
            row = conn.execute(
                "SELECT active FROM members WHERE id = ?", (member_id,)
            ).fetchone()
            return bool(row and row["active"])
        finally:
            conn.close()

    # ------------------------- Administration ------------------------- #
    def register_member(self, member_id: int, name: str) -> None:
        if name is None or not name.strip():
            raise ValueError("Member name cannot be empty.")
        conn = get_db_connection(self.db_file)
        try:
            conn.execute(
                "INSERT INTO members (id, name) VALUES (?, ?)", (member_id, name.strip())
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise ValueError(f"Member {member_id} already exists.") from e
        finally:
            conn.close()
        logger.info("Registered member %s (%s)", member_id, name.strip())

    def deactivate_member(self, member_id: int) -> bool:
        """Returns False if no such member."""
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute("UPDATE members SET active = 0 WHERE id = ?", (member_id,))
            conn.commit()
            updated = cursor.rowcount > 0
        finally:
            conn.close()
        if updated:
            logger.info("Deactivated member %s", member_id)
        return updated
