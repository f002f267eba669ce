"""Key-value storage adapters and logical tables."""

from cryptoex.storage.adapter import MemoryStorage, StorageAdapter
from cryptoex.storage.tables import (
    StorageTransaction,
    read_list,
    read_mapping,
    read_table,
    transaction,
    write_table,
)

__all__ = [
    "MemoryStorage",
    "StorageAdapter",
    "StorageTransaction",
    "read_list",
    "read_mapping",
    "read_table",
    "transaction",
    "write_table",
]
