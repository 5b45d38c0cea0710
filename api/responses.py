"""
api/responses.py -- Single translation step from service outcomes to HTTP.

Status mapping:
  Success       200  {code:200, message}
  BadRequest    400  {code:400, title:"Bad Request", message, fieldErrors}
  Conflict      400* {code:409, title:"Bad Request", message}
  Unauthorized  401  {code:401, title:"Unauthorized", message}

* Settings.conflict_status_code; 400 by default for compatibility with
  existing clients, 409 when configured.

Unauthorized carries no detail: validation failures, unknown usernames and
wrong passwords all produce the identical body.
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from api.models import ErrorResponse, FieldErrorModel, MessageResponse
from auth.service import BadRequest, Conflict, Outcome, Success, Unauthorized

BAD_REQUEST_MESSAGE = "Request body invalid!"
CONFLICT_MESSAGE = "Username already registered!"
UNAUTHORIZED_MESSAGE = "Invalid username or password!"


def render_outcome(outcome: Outcome, conflict_status_code: int = 400) -> JSONResponse:
    """Return the JSONResponse for a register/login outcome."""
    if isinstance(outcome, Success):
        return JSONResponse(status_code=200, content=MessageResponse(code=200, message=outcome.message).model_dump())

    if isinstance(outcome, BadRequest):
        body = ErrorResponse(
            code=400,
            title="Bad Request",
            message=BAD_REQUEST_MESSAGE,
            field_errors=[FieldErrorModel.from_domain(e) for e in outcome.field_errors],
        )
        return JSONResponse(status_code=400, content=body.to_body())

    if isinstance(outcome, Conflict):
        body = ErrorResponse(code=409, title="Bad Request", message=CONFLICT_MESSAGE)
        return JSONResponse(status_code=conflict_status_code, content=body.to_body())

    if isinstance(outcome, Unauthorized):
        body = ErrorResponse(code=401, title="Unauthorized", message=UNAUTHORIZED_MESSAGE)
        return JSONResponse(status_code=401, content=body.to_body())

    raise TypeError(f"Unhandled outcome type: {type(outcome).__name__}")
