"""Errors raised by the shop backend clients."""

from __future__ import annotations


class ShopApiError(Exception):
    """The shop backend answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFound(ShopApiError):
    """A detail fetch asked for an id the backend does not know."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)
