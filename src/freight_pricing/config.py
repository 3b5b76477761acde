from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_API_TIMEOUT = 20.0


@dataclass(frozen=True)
class Settings:
    environment: str = "dev"
    project_id: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    api_token: str | None = None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from environment variables.

    Args:
        environ: Mapping to read from instead of ``os.environ``

    Returns:
        Settings instance
    """
    env = os.environ if environ is None else environ
    timeout = env.get("PRICING_API_TIMEOUT")
    return Settings(
        environment=env.get("ENVIRONMENT", "dev"),
        project_id=env.get("PROJECT_ID") or None,
        api_base_url=(env.get("PRICING_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
        api_timeout=float(timeout) if timeout else DEFAULT_API_TIMEOUT,
        api_token=env.get("PRICING_API_TOKEN") or None,
    )


__all__ = ["Settings", "load_settings"]
