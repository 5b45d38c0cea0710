"""
api/routes/auth.py -- Registration and login REST endpoints.

Routes:
  POST /register  -- create credentials for a new username
  POST /login     -- check a username/password pair

Both handlers are thin: read the body, hand it to AuthService in the
threadpool (bcrypt is CPU-bound and must not block the event loop), and
pass the outcome to render_outcome(). No validation happens here.

Bodies may be JSON or form-encoded. A missing or empty body is treated as {}
so the validator reports every required field.

Security:
  /login failures are indistinguishable: bad input, unknown user and wrong
  password all return the same 401 body.
  Cache-Control: no-store on login responses.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.responses import render_outcome
from auth.service import AuthService
from core.config import Settings, get_settings

# Auth policy:
# - POST /register: public -- self-registration
# - POST /login:    public -- login endpoint must be unauthenticated
router = APIRouter()

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@router.post("/register")
async def register(request: Request, settings: Settings = Depends(get_settings)) -> JSONResponse:
    """Register a username with email, role ("type") and password."""
    service: AuthService = request.app.state.auth_service
    body = await read_body(request)
    outcome = await run_in_threadpool(service.register, body)
    return render_outcome(outcome, conflict_status_code=settings.conflict_status_code)


@router.post("/login")
async def login(request: Request) -> JSONResponse:
    """Verify a username/password pair. Issues no session or token."""
    service: AuthService = request.app.state.auth_service
    body = await read_body(request)
    outcome = await run_in_threadpool(service.login, body)
    resp = render_outcome(outcome)
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def read_body(request: Request) -> Any:
    """Return the parsed request body, or {} when there is none.

    Raises HTTPException(400) when the body is present but is not valid JSON.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Malformed request body.") from exc
    return payload if payload is not None else {}
