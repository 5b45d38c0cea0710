"""
auth/service.py -- Register and login orchestration.

AuthService wires Validator -> CredentialStore -> PasswordHasher and returns
one of a closed set of outcome values. Expected failures (bad input,
duplicate username, bad credentials) are return values, never exceptions;
api/responses.py translates them to HTTP in one place.

Register:
  validate -> BadRequest(field_errors)
  find     -> Conflict if the username exists
  hash     -> configured cost factor
  insert   -> Conflict if a concurrent request won the race
  Success

Login:
  validate -> Unauthorized (same as a credential mismatch, on purpose)
  find     -> Unauthorized if absent (after a dummy verify)
  verify   -> Unauthorized on mismatch
  Success

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from auth.models import CredentialRecord, FieldError
from auth.passwords import PasswordHasher
from auth.store import CredentialStore, UsernameTakenError
from auth.validation import validate_login, validate_registration

logger = logging.getLogger("turnstile.auth")

REGISTER_OK = "Register successfully."
LOGIN_OK = "Login successfully."


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success:
    message: str


@dataclass(frozen=True)
class BadRequest:
    field_errors: tuple[FieldError, ...]


@dataclass(frozen=True)
class Conflict:
    username: str


@dataclass(frozen=True)
class Unauthorized:
    pass


Outcome = Union[Success, BadRequest, Conflict, Unauthorized]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AuthService:
    """Owns the credential store for one application lifespan.

    Usage:
        service = AuthService(rounds=12)
        service.register({"username": "alice", "email": "a@example.com", "type": "user", "password": "Secr3t!"})
        service.login({"username": "alice", "password": "Secr3t!"})
    """

    def __init__(self, rounds: int, store: CredentialStore | None = None) -> None:
        self.store = store if store is not None else CredentialStore()
        self.hasher = PasswordHasher(rounds)

    def register(self, data: Mapping[str, Any] | Any) -> Outcome:
        result = validate_registration(data)
        if not result.ok:
            logger.info("Registration rejected: %d invalid field(s)", len(result.errors))
            return BadRequest(field_errors=result.errors)

        request = result.value
        if self.store.find(request.username) is not None:
            logger.info("Registration rejected: username %r already registered", request.username)
            return Conflict(username=request.username)

        record = CredentialRecord(
            email=request.email,
            role=request.role,
            password_hash=self.hasher.hash(request.password),
            cost_factor=self.hasher.rounds,
        )
        try:
            self.store.insert(request.username, record)
        except UsernameTakenError:
            # Another request registered the same name while we were hashing.
            logger.info("Registration rejected: username %r registered concurrently", request.username)
            return Conflict(username=request.username)

        logger.info("Registered user %r (role=%s)", request.username, request.role.value)
        return Success(message=REGISTER_OK)

    def login(self, data: Mapping[str, Any] | Any) -> Outcome:
        result = validate_login(data)
        if not result.ok:
            logger.debug("Login rejected: request failed validation")
            return Unauthorized()

        request = result.value
        record = self.store.find(request.username)
        if record is None:
            # Equalize timing -- do NOT return before running bcrypt
            self.hasher.dummy_verify(request.password)
            logger.info("Login failed for %r", request.username)
            return Unauthorized()

        if not self.hasher.verify(request.password, record.password_hash):
            logger.info("Login failed for %r", request.username)
            return Unauthorized()

        logger.info("Login succeeded for %r", request.username)
        return Success(message=LOGIN_OK)
