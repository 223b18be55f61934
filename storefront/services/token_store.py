"""
Session token persistence.

The token is an opaque string stored under one fixed key. The engine never
reads it; it only learns whether one is present.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from storefront.config import settings

logger = logging.getLogger(__name__)


class TokenStore:
    """
    Abstract token storage.
    Implement with a file for the CLI/desktop, or in-memory for tests.
    """

    def __init__(self, key: str | None = None) -> None:
        self.key = key or settings.TOKEN_KEY

    def get(self) -> str | None:
        """Return the stored token, or None if there is none."""
        raise NotImplementedError

    def save(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def has_token(self) -> bool:
        return bool(self.get())


class MemoryTokenStore(TokenStore):
    """In-memory token storage for testing."""

    def __init__(self, token: str | None = None, key: str | None = None) -> None:
        super().__init__(key)
        self._data: dict[str, str] = {}
        if token:
            self._data[self.key] = token

    def get(self) -> str | None:
        return self._data.get(self.key)

    def save(self, token: str) -> None:
        self._data[self.key] = token

    def clear(self) -> None:
        self._data.pop(self.key, None)


class FileTokenStore(TokenStore):
    """
    Token storage backed by a small JSON file.

    Other keys already present in the file are left alone.
    """

    def __init__(self, path: Path | None = None, key: str | None = None) -> None:
        super().__init__(key)
        self.path = path or settings.TOKEN_FILE

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            # A file that already existed keeps its old mode until this.
            os.fchmod(f.fileno(), 0o600)
            json.dump(data, f, indent=2)

    def get(self) -> str | None:
        return self._load().get(self.key)

    def save(self, token: str) -> None:
        data = self._load()
        data[self.key] = token
        self._write(data)

    def clear(self) -> None:
        data = self._load()
        if data.pop(self.key, None) is not None:
            self._write(data)
