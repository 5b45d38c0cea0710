#!/usr/bin/env python3
"""
Turnstile -- minimal user registration and authentication service.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --port 3000
  python main.py --reload --log-level debug

Environment variables (all optional, see core/config.py):
  TURNSTILE_BCRYPT_ROUNDS         bcrypt cost factor (default 10)
  TURNSTILE_CONFLICT_STATUS_CODE  HTTP status for a duplicate username, 400 or 409
  TURNSTILE_HOST / TURNSTILE_PORT default bind address
  TURNSTILE_LOG_LEVEL / TURNSTILE_DEBUG
"""

from __future__ import annotations

import argparse

import uvicorn

from core.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="turnstile",
        description="Run the Turnstile registration and login API.",
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    parser.add_argument(
        "--log-level",
        default=settings.effective_log_level.lower(),
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    print(f"  Turnstile listening at http://{args.host}:{args.port}")
    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload, log_level=args.log_level)


if __name__ == "__main__":
    main()
