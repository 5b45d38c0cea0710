"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own domain
shape; the validator, store and service do the work.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    user = "user"
    admin = "admin"


@dataclass(frozen=True)
class CredentialRecord:
    """The stored credentials for one username.

    Frozen: a record is created on successful registration and never mutated.

    cost_factor is the bcrypt work factor used to produce password_hash. It is
    kept for reference only -- the real per-user salt lives inside the bcrypt
    hash string itself ($2b$<cost>$<22-char salt><31-char digest>).
    """

    email: str
    role: Role
    password_hash: str
    cost_factor: int


@dataclass(frozen=True)
class FieldError:
    """One violated validation rule, named by the offending request field."""

    field: str
    message: str
