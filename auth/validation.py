"""
auth/validation.py -- Field rules for registration and login requests.

Pydantic v2 models check shape: presence, string types, role membership and
email syntax. The length and complexity rules for username and password live
in a separate rule table, so a value that breaks two rules gets two
FieldErrors. validate_registration() and validate_login() run both and
return a ValidationResult instead of raising, so the service layer branches
on a value rather than catching exceptions.

Rules:
  username  required string, 3..24 characters
  email     required string, valid email syntax (email-validator; the
            "Name <addr>" display-name form is rejected, the value is kept
            exactly as sent)
  type      required, "user" or "admin" (case-sensitive); "role" also accepted
  password  required string, 5..24 characters, at least one lowercase letter,
            one uppercase letter and one character that is neither letter nor
            digit

Login reuses the registration username/password rules.

Unknown fields are ignored. Every violated rule on every field is reported.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Generic, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field, StrictStr, ValidationError

from auth.models import FieldError, Role

# \Z rather than $: re's $ also matches just before a trailing newline.
PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[^a-zA-Z0-9]).{3,}\Z"
PASSWORD_COMPLEXITY_MESSAGE = "Password must contain an uppercase letter, a lowercase letter and a special character."

USERNAME_MIN, USERNAME_MAX = 3, 24
PASSWORD_MIN, PASSWORD_MAX = 5, 24

_PASSWORD_RE = re.compile(PASSWORD_PATTERN)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rule:
    """One check on a string field and the message reported when it fails."""

    check: Callable[[str], bool]
    message: str


def _length_rules(field: str, low: int, high: int) -> tuple[Rule, ...]:
    return (
        Rule(lambda v: len(v) >= low, f'"{field}" length must be at least {low} characters long'),
        Rule(lambda v: len(v) <= high, f'"{field}" length must be less than or equal to {high} characters long'),
    )


USERNAME_RULES = _length_rules("username", USERNAME_MIN, USERNAME_MAX)
PASSWORD_RULES = _length_rules("password", PASSWORD_MIN, PASSWORD_MAX) + (
    Rule(lambda v: _PASSWORD_RE.match(v) is not None, PASSWORD_COMPLEXITY_MESSAGE),
)

# Shared by registration and login; keyed by wire field name.
_CREDENTIAL_RULES: dict[str, tuple[Rule, ...]] = {
    "username": USERNAME_RULES,
    "password": PASSWORD_RULES,
}


def _check_email(value: str) -> str:
    # EmailStr is not used: it accepts "Name <addr>" and keeps only the address.
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"value is not a valid email address: {exc}") from exc
    return value


Email = Annotated[StrictStr, AfterValidator(_check_email)]


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RegistrationRequest(BaseModel):
    """Validated registration input. The wire field for role is "type"."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    username: StrictStr
    email: Email
    role: Role = Field(validation_alias=AliasChoices("type", "role"))
    password: StrictStr


class LoginRequest(BaseModel):
    """Validated login input."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    username: StrictStr
    password: StrictStr


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a validated request (value) or the field errors that rejected it."""

    value: T | None = None
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_registration(data: Mapping[str, Any] | Any) -> ValidationResult[RegistrationRequest]:
    """Check a registration body against the field rules."""
    return _validate(RegistrationRequest, data)


def validate_login(data: Mapping[str, Any] | Any) -> ValidationResult[LoginRequest]:
    """Check a login body against the (registration-strength) field rules."""
    return _validate(LoginRequest, data)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _validate(schema: type[BaseModel], data: Any) -> ValidationResult:
    errors: list[FieldError] = []
    value = None
    try:
        value = schema.model_validate(data)
    except ValidationError as exc:
        errors.extend(_to_field_error(err) for err in exc.errors())

    # Rules run only on string values; anything else already carries a type
    # or missing-field error from the schema.
    if isinstance(data, Mapping):
        for field, rules in _CREDENTIAL_RULES.items():
            raw = data.get(field)
            if isinstance(raw, str):
                errors.extend(FieldError(field=field, message=rule.message) for rule in rules if not rule.check(raw))

    if errors:
        return ValidationResult(errors=tuple(errors))
    return ValidationResult(value=value)


def _to_field_error(err: dict) -> FieldError:
    # loc is empty when the whole body is the wrong shape (e.g. a JSON array).
    loc = err.get("loc") or ()
    field = str(loc[0]) if loc else "body"
    return FieldError(field=field, message=err.get("msg", "Invalid value."))
