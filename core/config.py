"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for Turnstile happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to prefixed env
      var names (e.g. bcrypt_rounds -> TURNSTILE_BCRYPT_ROUNDS).

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("turnstile.config")

# bcrypt accepts work factors 4..31 (2^4 .. 2^31 key expansion rounds).
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="TURNSTILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Work factor handed to bcrypt.gensalt(). Also recorded on every
    # credential record so the cost used at registration is known later.
    bcrypt_rounds: int = 10

    # HTTP status sent with the duplicate-username body. The body always
    # carries code 409; 400 keeps existing clients working.
    conflict_status_code: int = 400

    # ------------------------------------------------------------------
    # Server (used by main.py only)
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 3000

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        if not MIN_BCRYPT_ROUNDS <= value <= MAX_BCRYPT_ROUNDS:
            raise ValueError(f"bcrypt_rounds must be between {MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}.")
        if value < 10:
            logger.warning("bcrypt_rounds=%d is below the recommended minimum of 10.", value)
        return value

    @field_validator("conflict_status_code")
    @classmethod
    def validate_conflict_status_code(cls, value: int) -> int:
        if value not in (400, 409):
            raise ValueError("conflict_status_code must be 400 or 409.")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.
    All modules should call get_settings() rather than constructing Settings() directly.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
