"""
tests/test_store.py -- Unit tests for the in-memory CredentialStore.

Coverage:
  - find() on an empty store, insert() then find()
  - Duplicate insert raises UsernameTakenError and keeps the first record
  - Keys are exact (case-sensitive)
  - insert() is atomic under concurrent threads: exactly one winner
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from auth.models import CredentialRecord, Role
from auth.store import CredentialStore, UsernameTakenError


def _record(email: str = "alice@example.com") -> CredentialRecord:
    return CredentialRecord(email=email, role=Role.user, password_hash="$2b$04$fakehash", cost_factor=4)


def test_find_on_empty_store(store: CredentialStore) -> None:
    assert store.find("alice") is None
    assert len(store) == 0
    assert "alice" not in store


def test_insert_then_find(store: CredentialStore) -> None:
    record = _record()
    store.insert("alice", record)
    assert store.find("alice") == record
    assert len(store) == 1
    assert "alice" in store


def test_duplicate_insert_keeps_first_record(store: CredentialStore) -> None:
    store.insert("alice", _record("first@example.com"))
    with pytest.raises(UsernameTakenError) as exc_info:
        store.insert("alice", _record("second@example.com"))
    assert exc_info.value.username == "alice"
    assert store.find("alice").email == "first@example.com"
    assert len(store) == 1


def test_usernames_are_case_sensitive(store: CredentialStore) -> None:
    store.insert("alice", _record())
    assert store.find("Alice") is None
    store.insert("Alice", _record("other@example.com"))
    assert len(store) == 2


def test_concurrent_insert_has_exactly_one_winner(store: CredentialStore) -> None:
    workers = 16
    barrier = threading.Barrier(workers)

    def attempt(i: int) -> bool:
        barrier.wait()
        try:
            store.insert("alice", _record(f"user{i}@example.com"))
        except UsernameTakenError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(attempt, range(workers)))

    assert results.count(True) == 1
    assert len(store) == 1
