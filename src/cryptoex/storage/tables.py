"""Logical tables over a storage adapter.

Each table is one JSON document under a fixed key. Reads are typed
parse-or-default: a missing, malformed or mis-shaped document yields the
table's empty default instead of an error. In list and keyed tables a
single unreadable entry is dropped and its neighbours are kept. Every write
replaces the whole document, so two writers racing on the same table
resolve last-write-wins.
"""

from contextlib import contextmanager
from typing import Any, Callable, Generator, Mapping, TypeVar

from pydantic import TypeAdapter, ValidationError

from cryptoex.logging_config import get_logger
from cryptoex.storage.adapter import StorageAdapter

logger = get_logger(__name__)

T = TypeVar("T")

# Record keys (shared with data written by earlier releases)
USERS_KEY = "cryptoex_users_v1"
SESSION_KEY = "cryptoex_session_v1"
PROFILE_KEY = "cryptoex_profile_v1"
HISTORY_KEY = "cryptoex_history_v1"
REF_LOG_KEY = "cryptoex_ref_log_v1"
INCOMING_REF_KEY = "cryptoex_incoming_ref_v1"


def read_table(
    storage: StorageAdapter,
    key: str,
    adapter: TypeAdapter[T],
    default: Callable[[], T],
) -> T:
    """Parse a table document, or return its default.

    Args:
        storage: Storage adapter
        key: Record key
        adapter: Type adapter describing the table shape
        default: Factory for the empty table

    Returns:
        Parsed table, or ``default()`` when absent or unreadable
    """
    raw = storage.get(key)
    if not raw:
        return default()

    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        logger.warning("table_unreadable", key=key, errors=e.error_count())
        return default()


_LIST_SHAPE: TypeAdapter[list[Any]] = TypeAdapter(list[Any])
_MAPPING_SHAPE: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


def _validate_entry(key: str, item: TypeAdapter[T], value: Any, position: Any) -> T | None:
    try:
        return item.validate_python(value)
    except ValidationError as e:
        logger.warning("entry_unreadable", key=key, entry=position, errors=e.error_count())
        return None


def read_list(storage: StorageAdapter, key: str, item: TypeAdapter[T]) -> list[T]:
    """Parse a list table entry by entry.

    Entries that do not fit ``item`` are dropped; the rest are kept in order.
    """
    entries = []
    for index, value in enumerate(read_table(storage, key, _LIST_SHAPE, list)):
        entry = _validate_entry(key, item, value, index)
        if entry is not None:
            entries.append(entry)
    return entries


def read_mapping(storage: StorageAdapter, key: str, item: TypeAdapter[T]) -> dict[str, T]:
    """Parse a keyed table entry by entry, dropping entries that do not fit."""
    entries = {}
    for name, value in read_table(storage, key, _MAPPING_SHAPE, dict).items():
        entry = _validate_entry(key, item, value, name)
        if entry is not None:
            entries[name] = entry
    return entries


def write_table(storage: StorageAdapter, key: str, adapter: TypeAdapter[T], value: T) -> None:
    """Serialize a whole table document (camelCase keys)."""
    storage.set(key, adapter.dump_json(value, by_alias=True).decode("utf-8"))


def read_text(storage: StorageAdapter, key: str) -> str | None:
    """Read a single-string record, treating blank as absent."""
    value = (storage.get(key) or "").strip()
    return value or None


class StorageTransaction:
    """Write buffer over a storage adapter.

    Reads see pending writes. ``commit()`` hands every pending change to
    ``apply()`` at once; ``rollback()`` forgets them.
    """

    def __init__(self, storage: StorageAdapter):
        self._storage = storage
        self._pending: dict[str, str | None] = {}

    def get(self, key: str) -> str | None:
        if key in self._pending:
            return self._pending[key]
        return self._storage.get(key)

    def set(self, key: str, value: str) -> None:
        self._pending[key] = value

    def remove(self, key: str) -> None:
        self._pending[key] = None

    def apply(self, changes: Mapping[str, str | None]) -> None:
        self._pending.update(changes)

    def commit(self) -> None:
        if self._pending:
            self._storage.apply(dict(self._pending))
        self._pending.clear()

    def rollback(self) -> None:
        if self._pending:
            logger.debug("transaction_rolled_back", keys=sorted(self._pending))
        self._pending.clear()


@contextmanager
def transaction(storage: StorageAdapter) -> Generator[StorageTransaction, None, None]:
    """Provide an all-or-nothing scope for multi-table writes.

    Yields:
        Transaction usable anywhere a storage adapter is expected
    """
    tx = StorageTransaction(storage)
    try:
        yield tx
    except BaseException:
        tx.rollback()
        raise
    tx.commit()
