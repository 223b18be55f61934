"""
Engine test configuration.

Engine tests run against MemoryShopApi and MemoryTokenStore; nothing here
touches the network.
"""

from __future__ import annotations

import pytest

from storefront.engine import selectors
from storefront.engine.store import Store
from storefront.engine.tests.factories import make_product
from storefront.models import Product
from storefront.services.shop_api import MemoryShopApi
from storefront.services.token_store import MemoryTokenStore


@pytest.fixture
def p1() -> Product:
    return make_product(1, "10")


@pytest.fixture
def p2() -> Product:
    return make_product(2, "5")


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def api(p1, p2) -> MemoryShopApi:
    return MemoryShopApi(products=[p1, p2])


@pytest.fixture
def tokens() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture(autouse=True)
def reset_module_selectors():
    """Module-level selectors keep one cached view; start each test cold."""
    for value in vars(selectors).values():
        if isinstance(value, selectors.Selector):
            value.reset()
    yield
