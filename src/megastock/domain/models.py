# src/megastock/domain/models.py
from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field

DEFAULT_IMAGE = "https://via.placeholder.com/150"

# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


class Brand(StrEnum):
    DEMOBILE = "Demobile"
    MOSCONI = "Mosconi"
    MOLUFAN = "Molufan"
    SUPER_ESPUMA = "Super Espuma"
    PIERO = "Piero"
    SAN_JOSE = "San Jose"
    DJ = "DJ"
    MOVAL = "Moval"


class UserRole(StrEnum):
    ADMIN = "admin"
    VIEWER = "viewer"


# ---------------------------------------------------------------------------
# Aggregate: Product
# ---------------------------------------------------------------------------


class Product(BaseModel):
    """
    A furniture product as kept in the catalog.

    Records coming back from local storage or the remote store are validated
    through this model as well; nothing read from outside is trusted as-is.
    """

    id: int = Field(ge=1)
    name: str = Field(min_length=1, max_length=256)
    brand: Brand
    stock: int = Field(ge=0)
    price: Decimal = Field(ge=0)
    image: str = DEFAULT_IMAGE
    color: str | None = None

    model_config = {"frozen": True}


def duplicate_ids(products: list[Product]) -> list[int]:
    """Ids that occur more than once, in order of first repetition."""
    seen: set[int] = set()
    duplicates: list[int] = []
    for product in products:
        if product.id in seen and product.id not in duplicates:
            duplicates.append(product.id)
        seen.add(product.id)
    return duplicates


# ---------------------------------------------------------------------------
# API Request/Response Schemas
#
# The request schemas only check types. Business rules (non-negative stock
# and price, known brand) are enforced by ProductStore.
# ---------------------------------------------------------------------------


class ProductCreate(BaseModel):
    name: str
    brand: str
    stock: int
    price: Decimal
    image: str = DEFAULT_IMAGE
    color: str | None = None


class PriceUpdate(BaseModel):
    price: Decimal


class PriceChange(BaseModel):
    product_id: int
    price: Decimal


class BulkPriceUpdate(BaseModel):
    updates: list[PriceChange] = Field(min_length=1)


class StockIncrement(BaseModel):
    quantity: int


class SaleCreate(BaseModel):
    quantity: int


class BrandValue(BaseModel):
    brand: Brand
    total_value: Decimal


class InventorySummary(BaseModel):
    product_count: int
    total_units: int
    total_value: Decimal
    value_by_brand: list[BrandValue]
    low_stock: list[Product]


class ValidationErrorDetail(BaseModel):
    field: str
    reason: str
