"""Logical tables - parse-or-default reads and the write transaction.

Tests cover:
    - Missing, malformed and mis-shaped documents read as the empty default
    - List and keyed tables drop only the entries that do not parse
    - Tables are written with camelCase keys; legacy keys still read
    - Transactions apply all writes on success and none on failure
"""

import json

import pytest

from cryptoex.auth.models import UserRecord, user_adapter, users_adapter
from cryptoex.storage.adapter import MemoryStorage
from cryptoex.storage.tables import (
    SESSION_KEY,
    USERS_KEY,
    read_list,
    read_mapping,
    read_table,
    read_text,
    transaction,
    write_table,
)


def test_missing_table_reads_as_default():
    storage = MemoryStorage()
    assert read_table(storage, USERS_KEY, users_adapter, list) == []


def test_malformed_json_reads_as_default():
    storage = MemoryStorage({USERS_KEY: "{not json"})
    assert read_table(storage, USERS_KEY, users_adapter, list) == []


def test_wrong_shape_reads_as_default():
    storage = MemoryStorage({USERS_KEY: json.dumps({"email": "a@b.com"})})
    assert read_table(storage, USERS_KEY, users_adapter, list) == []


def test_read_list_drops_only_unreadable_entries():
    raw = json.dumps([{"email": "a@b.com"}, {"email": ["x"]}, "oops", {"email": "c@d.com"}])
    storage = MemoryStorage({USERS_KEY: raw})

    users = read_list(storage, USERS_KEY, user_adapter)

    assert [user.email for user in users] == ["a@b.com", "c@d.com"]


def test_read_mapping_of_wrong_shape_reads_as_default():
    storage = MemoryStorage({USERS_KEY: json.dumps(["a@b.com"])})
    assert read_mapping(storage, USERS_KEY, user_adapter) == {}


def test_users_written_with_camel_case_keys():
    storage = MemoryStorage()
    user = UserRecord(email="a@b.com", password_hash="ab" * 32, ref_code="ABCDEFGH")
    write_table(storage, USERS_KEY, users_adapter, [user])

    stored = json.loads(storage.get(USERS_KEY))
    assert stored == [
        {"email": "a@b.com", "passwordHash": "ab" * 32, "refCode": "ABCDEFGH", "referredBy": ""}
    ]


def test_legacy_pass_hash_key_is_read():
    raw = json.dumps([{"email": "old@b.com", "passHash": "cd" * 32}])
    storage = MemoryStorage({USERS_KEY: raw})

    users = read_table(storage, USERS_KEY, users_adapter, list)

    assert users[0].password_hash == "cd" * 32
    assert users[0].ref_code == ""


def test_read_text_treats_blank_as_absent():
    storage = MemoryStorage({SESSION_KEY: "   "})
    assert read_text(storage, SESSION_KEY) is None


def test_transaction_reads_see_pending_writes():
    storage = MemoryStorage()
    with transaction(storage) as tx:
        tx.set(SESSION_KEY, "a@b.com")
        assert tx.get(SESSION_KEY) == "a@b.com"
        assert storage.get(SESSION_KEY) is None
    assert storage.get(SESSION_KEY) == "a@b.com"


def test_transaction_discards_writes_on_error():
    storage = MemoryStorage({SESSION_KEY: "before@b.com"})

    with pytest.raises(RuntimeError):
        with transaction(storage) as tx:
            tx.set(USERS_KEY, "[]")
            tx.remove(SESSION_KEY)
            raise RuntimeError("boom")

    assert storage.get(USERS_KEY) is None
    assert storage.get(SESSION_KEY) == "before@b.com"


def test_transaction_remove_applies_on_commit():
    storage = MemoryStorage({SESSION_KEY: "a@b.com"})
    with transaction(storage) as tx:
        tx.remove(SESSION_KEY)
        assert tx.get(SESSION_KEY) is None
    assert storage.get(SESSION_KEY) is None
