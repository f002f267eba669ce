"""Exchange history, newest first."""

from typing import Any, Mapping

from cryptoex.account.models import history_adapter, history_entry_adapter
from cryptoex.logging_config import get_logger
from cryptoex.storage.adapter import StorageAdapter
from cryptoex.storage.tables import HISTORY_KEY, read_list, write_table

logger = get_logger(__name__)


class HistoryStore:
    """Append-at-head log of exchange records tagged with an email."""

    def __init__(self, storage: StorageAdapter):
        self.storage = storage

    def all(self) -> list[dict[str, Any]]:
        return read_list(self.storage, HISTORY_KEY, history_entry_adapter)

    def append(self, email: str, record: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a record at the head of the log.

        Args:
            email: Owner of the record
            record: Exchange payload; any ``email`` key is overwritten

        Returns:
            Stored record
        """
        entry = {**record, "email": email}
        history = self.all()
        history.insert(0, entry)
        write_table(self.storage, HISTORY_KEY, history_adapter, history)

        logger.info("exchange_recorded", entries=len(history))
        return entry

    def list_for(self, email: str) -> list[dict[str, Any]]:
        """Records owned by ``email`` (case-insensitive), newest first."""
        wanted = (email or "").strip().lower()
        return [
            entry for entry in self.all()
            if str(entry.get("email") or "").lower() == wanted
        ]
