"""Product records as served by the catalog endpoints."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Product(BaseModel):
    """A catalog product. Immutable once loaded; a reload replaces it wholesale."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    price: Decimal = Field(ge=0)
    description: str = ""
    image_url: str | None = None
