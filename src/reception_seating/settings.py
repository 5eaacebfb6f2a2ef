"""Runtime configuration for talking to the guest directory."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import AllocationError, ErrorKind

DEFAULT_ENV_FILE = Path(".env.local")


def get_required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise AllocationError(ErrorKind.CONFIGURATION, f"Missing environment variable: {name}", variable=name)
    return value


class Settings:
    """Supabase credentials loaded from the environment."""

    def __init__(self, *, supabase_url: str, service_role_key: str, request_timeout: float = 30.0) -> None:
        self.supabase_url = supabase_url
        self.service_role_key = service_role_key
        self.request_timeout = request_timeout

    @property
    def rest_url(self) -> str:
        return f"{self.supabase_url.rstrip('/')}/rest/v1"


def load_settings(env_file: Optional[Path] = DEFAULT_ENV_FILE) -> Settings:
    """Read settings, filling gaps from ``env_file`` when it exists.

    Variables already set in the environment take precedence over the file.
    """
    if env_file is not None and Path(env_file).is_file():
        load_dotenv(env_file, override=False)
    timeout_env = os.getenv("SUPABASE_TIMEOUT")
    return Settings(
        supabase_url=get_required_env("SUPABASE_URL"),
        service_role_key=get_required_env("SUPABASE_SERVICE_ROLE_KEY"),
        request_timeout=float(timeout_env) if timeout_env else 30.0,
    )
