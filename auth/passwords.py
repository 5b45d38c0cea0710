"""
auth/passwords.py -- bcrypt password hashing and verification.

Security design decisions:
  bcrypt is the right choice for low-entropy secrets (passwords) because its
  cost factor makes brute-force expensive. The salt is generated by
  bcrypt.gensalt() on every hash call and embedded in the output string, so
  callers never manage salts themselves.

  bcrypt only looks at the first 72 bytes of its input. Older releases
  truncated silently; current releases raise ValueError. Both functions below
  truncate explicitly so behaviour does not depend on the installed version.
  The validator caps passwords at 24 characters, so only multi-byte input can
  reach the limit.

  PasswordHasher.dummy_verify() enables timing equalization in the login
  path so response time does not reveal whether a username exists.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger("turnstile.auth")

_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int) -> str:
    """Return a salted bcrypt hash of the plaintext password at the given cost factor."""
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw compares in constant time. A stored value that is not a
    bcrypt hash makes checkpw raise ValueError; that is reported as a mismatch.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed; treating as mismatch")
        return False


class PasswordHasher:
    """Binds a bcrypt cost factor to hash/verify.

    Usage:
        hasher = PasswordHasher(rounds=12)
        stored = hasher.hash("S3cret!")
        hasher.verify("S3cret!", stored)   # True
    """

    def __init__(self, rounds: int) -> None:
        self.rounds = rounds
        # Timing equalization dummy hash. Computed once per hasher, at the
        # same cost as real hashes, so a lookup miss costs the same as a
        # wrong password.
        self._dummy_hash = hash_password("turnstile_timing_dummy", rounds)

    def hash(self, plain: str) -> str:
        return hash_password(plain, self.rounds)

    def verify(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def dummy_verify(self, plain: str) -> None:
        """Burn one verify's worth of work. Always call on a username miss."""
        verify_password(plain, self._dummy_hash)
