import logging
from abc import abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Any

import httpx

import library_catalog.database as database
from library_catalog.config import Settings, settings as default_settings
from library_catalog.database import get_db_connection, initialize_database
from library_catalog.interfaces import Notifier
from library_catalog.library_service import NotificationError

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    BORROW = "borrow"
    RETURN = "return"


class _EventNotifier(Notifier):
    """Routes both contract methods into a single ``send`` hook."""

    def notify_borrow(self, member_id: int, title: str) -> None:
        self.send(member_id, title, NotificationKind.BORROW)

    def notify_return(self, member_id: int, title: str) -> None:
        self.send(member_id, title, NotificationKind.RETURN)

    @abstractmethod
    def send(self, member_id: int, title: str, kind: NotificationKind) -> None:
        pass


class LoggingNotifier(_EventNotifier):
    def send(self, member_id: int, title: str, kind: NotificationKind) -> None:
        logger.info("Notification: member %s %s '%s'", member_id, kind.value, title)


class SqliteNotificationLog(_EventNotifier):
    """Keeps every event in the notifications table."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file or database.DATABASE_FILE
        initialize_database(self.db_file)

    def send(self, member_id: int, title: str, kind: NotificationKind) -> None:
        conn = get_db_connection(self.db_file)
        try:
            conn.execute(
                "INSERT INTO notifications (member_id, title, kind) VALUES (?, ?, ?)",
                (member_id, title, kind.value),
            )
            conn.commit()
        finally:
            conn.close()

    def recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Newest events first."""
        conn = get_db_connection(self.db_file)
        try:
            rows = conn.execute(
                "SELECT member_id, title, kind, created_at FROM notifications ORDER BY id DESC LIMIT ?",
                (limit,),
            ).fetchall()
            return [dict(row) for row in rows]
        finally:
            conn.close()


class WebhookNotifier(_EventNotifier):
    """POSTs each event as JSON to a webhook URL.

    Delivery problems are logged and dropped unless ``raise_on_error`` is set,
    in which case they surface as ``NotificationError``.
    """

    def __init__(self, url: str, timeout: float = 5.0, raise_on_error: bool = False,
                 client: Optional[httpx.Client] = None) -> None:
        self.url = url
        self.raise_on_error = raise_on_error
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout), follow_redirects=True)

    def send(self, member_id: int, title: str, kind: NotificationKind) -> None:
        payload = {"member_id": member_id, "title": title, "event": kind.value}
        try:
            response = self._client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(f"Webhook notification failed for {kind.value} of '{title}': {exc}")
            if self.raise_on_error:
                raise NotificationError(f"Webhook delivery to {self.url} failed") from exc

    def close(self) -> None:
        self._client.close()


class CompositeNotifier(_EventNotifier):
    """Fans each event out to several notifiers, in order."""

    def __init__(self, *notifiers: Notifier) -> None:
        self.notifiers = list(notifiers)

    def send(self, member_id: int, title: str, kind: NotificationKind) -> None:
        for notifier in self.notifiers:
            if kind is NotificationKind.BORROW:
                notifier.notify_borrow(member_id, title)
            else:
                notifier.notify_return(member_id, title)

    def close(self) -> None:
        """Close every wrapped notifier that holds resources (e.g. a webhook client)."""
        for notifier in self.notifiers:
            close = getattr(notifier, "close", None)
            if callable(close):
                close()


def build_notifier(config: Optional[Settings] = None, db_file: Optional[str] = None) -> CompositeNotifier:
    """Logging + SQLite event log, plus a webhook when one is configured."""
    config = config or default_settings
    notifiers: List[Notifier] = [LoggingNotifier(), SqliteNotificationLog(db_file)]
    if config.notification_webhook_url:
        notifiers.append(WebhookNotifier(config.notification_webhook_url, timeout=config.notification_timeout))
    return CompositeNotifier(*notifiers)
