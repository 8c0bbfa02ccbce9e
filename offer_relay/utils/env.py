"""Utilities for locating and reading environment configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator
from urllib.parse import urlparse

# Value shipped in the deployment template; treated the same as an unset URL.
PLACEHOLDER_WEBHOOK_URL = "https://your-n8n-url/webhook/offer-letter"


def _iter_env_files() -> Iterator[Path]:
    """Yield probable `.env` files ordered by proximity to the project."""

    seen: set[Path] = set()

    def walk(start: Path) -> Iterator[Path]:
        cursor = start if start.is_dir() else start.parent

        while True:
            env_path = cursor / ".env"
            if env_path not in seen:
                seen.add(env_path)
                if env_path.exists():
                    yield env_path

            if cursor.parent == cursor:
                break
            cursor = cursor.parent

    module_root = Path(__file__).resolve().parent
    cwd_root = Path.cwd()

    for candidate in (module_root, cwd_root):
        yield from walk(candidate)


def resolve_env_path() -> Path:
    """Return the `.env` file the service should load.

    ``ENV_PATH`` wins when set, even if the file does not exist, so that tests
    and deployments can point at an explicit location. Otherwise the closest
    existing `.env` is used, falling back to the project root.
    """

    explicit = os.getenv("ENV_PATH")
    if explicit:
        return Path(explicit).expanduser()

    for env_path in _iter_env_files():
        return env_path

    return Path(__file__).resolve().parents[2] / ".env"


def normalise_webhook_url(value: str | None) -> str | None:
    """Clean up a webhook URL and drop placeholders.

    Returns ``None`` when the value is missing, blank or still the template
    placeholder. Raises ``ValueError`` when something is configured but it is
    not an absolute http(s) URL.
    """

    if not value:
        return None

    candidate = value.strip()
    if not candidate or candidate == PLACEHOLDER_WEBHOOK_URL:
        return None

    parsed = urlparse(candidate)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"Webhook URL must be an absolute http(s) URL, got {candidate!r}")

    return candidate


__all__ = ["PLACEHOLDER_WEBHOOK_URL", "normalise_webhook_url", "resolve_env_path"]
