"""
auth/store.py -- In-memory credential repository.

Pattern: Repository. CredentialStore is the only code that touches the
username -> CredentialRecord mapping; the service never sees the dict.

Concurrency:
  FastAPI runs sync work in a threadpool, so two registrations for the same
  username can reach the store at the same time. insert() performs the
  existence check and the write under one lock, which makes it an atomic
  insert-if-absent. The service still calls find() first to skip the bcrypt
  work for an obviously taken name, but insert() is the authority.

Lifetime: one store per AuthService, which lives for one application
lifespan. Nothing is persisted.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import threading

from auth.models import CredentialRecord


class UsernameTakenError(Exception):
    """Raised by CredentialStore.insert() when the username already has a record."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username already registered: {username!r}")
        self.username = username


class CredentialStore:
    """Repository for CredentialRecord entities, keyed by exact username.

    Usage:
        store = CredentialStore()
        store.insert("alice", CredentialRecord(...))
        record = store.find("alice")
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, CredentialRecord] = {}

    def find(self, username: str) -> CredentialRecord | None:
        """Look up a record by exact username (case-sensitive). Returns None if not found."""
        with self._lock:
            return self._records.get(username)

    def insert(self, username: str, record: CredentialRecord) -> None:
        """Store a record for a new username.

        Raises UsernameTakenError if a record already exists; the existing
        record is left untouched.
        """
        with self._lock:
            if username in self._records:
                raise UsernameTakenError(username)
            self._records[username] = record

    def __contains__(self, username: object) -> bool:
        with self._lock:
            return username in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
