"""
Storefront configuration — all environment variables in one place.

Read from environment at import time. Never hardcode secrets.
"""

from __future__ import annotations

import os
from pathlib import Path


class Settings:
    """Application settings from environment variables."""

    # Shop backend
    API_URL: str = os.environ.get("STOREFRONT_API_URL", "http://localhost:3000/api")
    HTTP_TIMEOUT: float = float(os.environ.get("STOREFRONT_HTTP_TIMEOUT", "10"))

    # Session token persistence
    TOKEN_KEY: str = os.environ.get("STOREFRONT_TOKEN_KEY", "auth_token")
    TOKEN_FILE: Path = Path(
        os.environ.get("STOREFRONT_TOKEN_FILE", str(Path.home() / ".storefront" / "session.json"))
    )

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Singleton instance
settings = Settings()

if settings.is_production and not os.environ.get("STOREFRONT_API_URL"):
    raise RuntimeError("STOREFRONT_API_URL environment variable is required in production")
