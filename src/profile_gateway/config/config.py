"""
Environment Configuration

Reads gateway settings from the process environment.
Supabase credentials are optional here: a missing URL or key only surfaces
when the first remote call builds the client (see db.factory).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

SUPPORTED_PROVIDERS = ("supabase", "postgres", "memory")


class ConfigurationError(ValueError):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class EnvironmentConfig:
    """Settings for the gateway process."""

    db_provider: str = "supabase"
    supabase_url: str | None = None
    supabase_key: str | None = None
    postgres_dsn: str | None = None
    postgres_pool_min: int = 1
    postgres_pool_max: int = 10
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    logfire_enabled: bool = False
    logfire_token: str | None = None


def _parse_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _parse_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_environment_config() -> EnvironmentConfig:
    """
    Load configuration from environment variables.

    Raises:
        ConfigurationError: on an unknown DB_PROVIDER or a malformed number.
    """
    provider = os.getenv("DB_PROVIDER", "supabase").lower().strip()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"DB_PROVIDER='{provider}' is not supported. "
            f"Valid values: {', '.join(repr(p) for p in SUPPORTED_PROVIDERS)}."
        )

    port = _parse_int("PORT", 3000)
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT must be between 1 and 65535, got {port}")

    pool_min = _parse_int("POSTGRES_POOL_MIN", 1)
    pool_max = _parse_int("POSTGRES_POOL_MAX", 10)
    if pool_min < 1 or pool_max < pool_min:
        raise ConfigurationError(
            f"Invalid postgres pool size (min={pool_min}, max={pool_max})"
        )

    return EnvironmentConfig(
        db_provider=provider,
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_KEY") or None,
        postgres_dsn=os.getenv("POSTGRES_DSN") or None,
        postgres_pool_min=pool_min,
        postgres_pool_max=pool_max,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        logfire_enabled=_parse_bool("LOGFIRE_ENABLED"),
        logfire_token=os.getenv("LOGFIRE_TOKEN") or None,
    )
