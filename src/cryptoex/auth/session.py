"""Single-slot session pointer."""

from cryptoex.logging_config import get_logger
from cryptoex.storage.adapter import StorageAdapter
from cryptoex.storage.tables import SESSION_KEY, read_text

logger = get_logger(__name__)


class SessionManager:
    """Holds the email of the one signed-in user, if any."""

    def __init__(self, storage: StorageAdapter):
        self.storage = storage

    def set_active(self, email: str) -> None:
        self.storage.set(SESSION_KEY, email)
        logger.debug("session_set")

    def get_active(self) -> str | None:
        return read_text(self.storage, SESSION_KEY)

    def clear(self) -> None:
        self.storage.remove(SESSION_KEY)
        logger.debug("session_cleared")
