"""HTTP transport for the shop backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter

from storefront.config import settings
from storefront.models import LoginRequest, Order, OrderDraft, Product, RegisterRequest
from storefront.services.errors import NotFound, ShopApiError
from storefront.services.shop_api import ShopApi
from storefront.services.token_store import TokenStore

logger = logging.getLogger(__name__)

_products_adapter = TypeAdapter(list[Product])
_orders_adapter = TypeAdapter(list[Order])


class HttpShopApi(ShopApi):
    """
    ShopApi over HTTP/JSON.

    Routes (relative to the API base URL):
        GET  /products          GET  /products/{id}
        POST /auth/login        POST /auth/register
        POST /orders            GET  /orders          GET /orders/{id}

    Error statuses become ShopApiError (404 becomes NotFound). Transport
    failures propagate as httpx.HTTPError. No retries.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.API_URL).rstrip("/")
        self._token_store = token_store
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT

    def _headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self._token_store.get() if self._token_store else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self._base_url}{path}"
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.request(method, url, json=json, headers=self._headers())

        if response.status_code == 404:
            raise NotFound(f"{method} {path}: not found")
        if response.status_code >= 400:
            raise ShopApiError(
                f"{method} {path} failed: {response.status_code} {_error_detail(response)}",
                status_code=response.status_code,
            )
        logger.debug("%s %s -> %s", method, path, response.status_code)
        if not response.content:
            return None
        return response.json()

    async def list_products(self) -> list[Product]:
        return _products_adapter.validate_python(await self._request("GET", "/products"))

    async def get_product(self, product_id: int) -> Product:
        return Product.model_validate(await self._request("GET", f"/products/{product_id}"))

    async def login(self, request: LoginRequest) -> str:
        data = await self._request("POST", "/auth/login", json=request.model_dump(mode="json"))
        token = data.get("token") if isinstance(data, dict) else data
        if not isinstance(token, str) or not token:
            raise ShopApiError("Login response did not contain a token")
        return token

    async def register(self, request: RegisterRequest) -> dict:
        data = await self._request("POST", "/auth/register", json=request.model_dump(mode="json"))
        return data if isinstance(data, dict) else {"message": data}

    async def place_order(self, draft: OrderDraft) -> Order:
        body = draft.model_dump(mode="json", by_alias=True)
        return Order.model_validate(await self._request("POST", "/orders", json=body))

    async def list_orders(self) -> list[Order]:
        return _orders_adapter.validate_python(await self._request("GET", "/orders"))

    async def get_order(self, order_id: int) -> Order:
        return Order.model_validate(await self._request("GET", f"/orders/{order_id}"))


def _error_detail(response: httpx.Response) -> str:
    """Best-effort message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("detail") or body)
    return str(body)
