"""
Pytest configuration for the storefront service tests.
"""

from __future__ import annotations

import os
from unittest.mock import AsyncMock, patch

import pytest

# Set test environment variables before importing config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STOREFRONT_API_URL", "http://shop.test/api")


@pytest.fixture
def mock_http():
    """Patch httpx.AsyncClient; yields the client mock whose .request is awaited."""
    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client = AsyncMock()
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=None)
        mock_client_cls.return_value = mock_client
        yield mock_client
