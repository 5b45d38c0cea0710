"""
API response models for Turnstile REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. api/responses.py maps between the two.

Wire format follows the service's established JSON shape: every body carries
its own numeric "code", and field errors use the camelCase key "fieldErrors".
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from auth.models import FieldError


class FieldErrorModel(BaseModel):
    """One rejected request field."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str

    @classmethod
    def from_domain(cls, error: FieldError) -> FieldErrorModel:
        return cls(field=error.field, message=error.message)


class MessageResponse(BaseModel):
    """Success body, also used for the 404/500 fallbacks."""

    model_config = ConfigDict(frozen=True)

    code: int
    message: str


class ErrorResponse(BaseModel):
    """Failure body for 400/401/409 outcomes.

    field_errors is only present for request validation failures; it is
    dropped from the serialized body when None.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: int
    title: str
    message: str
    field_errors: list[FieldErrorModel] | None = Field(default=None, alias="fieldErrors")

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
