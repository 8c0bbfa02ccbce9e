from __future__ import annotations

import os

from dotenv import load_dotenv

from offer_relay.utils.env import normalise_webhook_url, resolve_env_path
from offer_relay.utils.logging import get_logger

logger = get_logger("config")

_ENV_PATH = resolve_env_path()

if _ENV_PATH.exists():
    load_dotenv(str(_ENV_PATH), override=False)
    logger.info("Loaded environment variables from file", extra={"path": str(_ENV_PATH)})
else:
    logger.warning(
        ".env file is missing; relying on existing environment variables",
        extra={"path": str(_ENV_PATH)},
    )


class RelayConfigurationError(RuntimeError):
    """Raised when a configuration value is present but unusable."""


def _strip_inline_comment(raw: str) -> str:
    """Remove inline shell-style comments from a value string."""

    comment_pos = raw.find("#")
    if comment_pos == -1:
        return raw.strip()
    return raw[:comment_pos].strip()


def _parse_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    cleaned = _strip_inline_comment(raw)
    if cleaned == "":
        return default
    try:
        return int(cleaned)
    except ValueError as exc:
        logger.error(
            "Failed to parse int from env",
            extra={"env_name": name, "env_value": raw},
        )
        raise RelayConfigurationError(f"Environment variable {name} must be an integer") from exc


def _parse_optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    cleaned = _strip_inline_comment(raw)
    if cleaned == "":
        return None
    try:
        value = float(cleaned)
    except ValueError as exc:
        logger.error(
            "Failed to parse float from env",
            extra={"env_name": name, "env_value": raw},
        )
        raise RelayConfigurationError(f"Environment variable {name} must be a number") from exc
    if value <= 0:
        raise RelayConfigurationError(f"Environment variable {name} must be positive")
    return value


def _parse_origins(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_webhook_url() -> str | None:
    """Return the relay destination, or ``None`` when the service runs in demo mode.

    The variable is read on every call so that a running process picks up
    changes made by the supervisor without a restart.
    """

    raw = os.getenv("N8N_WEBHOOK_URL")
    try:
        return normalise_webhook_url(raw)
    except ValueError as exc:
        logger.error("Invalid N8N_WEBHOOK_URL configured", extra={"env_value": raw})
        raise RelayConfigurationError(str(exc)) from exc


RELAY_TIMEOUT_SECONDS = _parse_optional_float("RELAY_TIMEOUT_SECONDS")
CORS_ALLOW_ORIGINS = _parse_origins(os.getenv("CORS_ALLOW_ORIGINS"))
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _parse_int("PORT", 5000)

logger.info(
    "Configuration loaded",
    extra={
        "RELAY_TIMEOUT_SECONDS": RELAY_TIMEOUT_SECONDS,
        "CORS_ALLOW_ORIGINS": CORS_ALLOW_ORIGINS,
        "HOST": HOST,
        "PORT": PORT,
        "WEBHOOK_CONFIGURED": bool(os.getenv("N8N_WEBHOOK_URL")),
    },
)


__all__ = [
    "RelayConfigurationError",
    "get_webhook_url",
    "RELAY_TIMEOUT_SECONDS",
    "CORS_ALLOW_ORIGINS",
    "HOST",
    "PORT",
]
