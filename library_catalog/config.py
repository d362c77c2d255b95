import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _parse_member_ids(raw: Optional[str]) -> List[int]:
    if not raw:
        return []
    return [int(part) for part in raw.split(",") if part.strip()]


@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_key: str = os.getenv("API_KEY", "super-secret-key")

    # Database settings
    data_file: str = os.getenv("LIBRARY_DB_FILE", "library.db")

    # Membership: when set, only these ids may borrow (members table is ignored)
    member_ids: List[int] = field(default_factory=lambda: _parse_member_ids(os.getenv("LIBRARY_MEMBER_IDS")))

    # Notification settings
    notification_webhook_url: Optional[str] = os.getenv("NOTIFICATION_WEBHOOK_URL")
    notification_timeout: float = float(os.getenv("NOTIFICATION_TIMEOUT", "5"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Catalog")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for the CLI and API entry points."""
    name = (level or ("DEBUG" if settings.debug else settings.log_level)).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
