"""Storage adapter contract and the in-memory implementation.

Stores never touch a persistence medium directly; they receive an object
satisfying ``StorageAdapter``. Values are opaque strings (JSON documents).
"""

from typing import Mapping, Protocol


class StorageAdapter(Protocol):
    """Named-record store: get/set/remove plus an atomic batch write."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def apply(self, changes: Mapping[str, str | None]) -> None: ...


class MemoryStorage:
    """Dict-backed storage adapter."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def apply(self, changes: Mapping[str, str | None]) -> None:
        for key, value in changes.items():
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value

    def keys(self) -> list[str]:
        return sorted(self._data)

    def __len__(self) -> int:
        return len(self._data)
