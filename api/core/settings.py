"""
Environment-driven settings.

Values are read once per request through `get_github_settings()` and passed
explicitly into the feature services, so nothing below the router reads
`os.environ` on its own.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"
DEFAULT_GITHUB_TIMEOUT_S = 20.0
DEFAULT_LOG_LEVEL = "INFO"


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class GitHubSettings:
    access_token: str | None = None
    api_base_url: str = DEFAULT_GITHUB_API_BASE_URL
    timeout_s: float = DEFAULT_GITHUB_TIMEOUT_S
    # 0 keeps the fan-out unbounded (one request per remaining page).
    max_concurrency: int = 0


def github_access_token() -> str | None:
    return _env_str("GITHUB_ACCESS_TOKEN") or _env_str("GITHUB_TOKEN") or None


def get_github_settings() -> GitHubSettings:
    """
    Build GitHub settings from env. Used as a FastAPI dependency.
    """
    return GitHubSettings(
        access_token=github_access_token(),
        api_base_url=_env_str("GITHUB_API_BASE_URL", DEFAULT_GITHUB_API_BASE_URL).rstrip("/"),
        timeout_s=_env_float("GITHUB_TIMEOUT_S", DEFAULT_GITHUB_TIMEOUT_S),
        max_concurrency=max(0, _env_int("GITHUB_MAX_CONCURRENCY", 0)),
    )


def configure_logging() -> None:
    level_name = _env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
