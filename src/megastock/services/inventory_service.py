# src/megastock/services/inventory_service.py
from __future__ import annotations

from decimal import Decimal

from megastock.domain.models import Brand, BrandValue, InventorySummary, Product
from megastock.services.product_store import ProductStore


class InventoryService:
    def __init__(self, store: ProductStore, low_stock_threshold: int) -> None:
        self._store = store
        self._low_stock_threshold = low_stock_threshold

    async def get_summary(self) -> InventorySummary:
        products = await self._store.get_all()
        return summarize(products, self._low_stock_threshold)

    async def get_low_stock(self) -> list[Product]:
        products = await self._store.get_all()
        return [p for p in products if p.stock <= self._low_stock_threshold]


def summarize(products: list[Product], low_stock_threshold: int) -> InventorySummary:
    """Inventory value is price x stock; brands are listed by descending value."""
    by_brand: dict[Brand, Decimal] = {}
    for product in products:
        by_brand[product.brand] = by_brand.get(product.brand, Decimal("0")) + (
            product.price * product.stock
        )

    value_by_brand = [
        BrandValue(brand=brand, total_value=total)
        for brand, total in sorted(by_brand.items(), key=lambda item: item[1], reverse=True)
    ]
    return InventorySummary(
        product_count=len(products),
        total_units=sum(p.stock for p in products),
        total_value=sum((v.total_value for v in value_by_brand), Decimal("0")),
        value_by_brand=value_by_brand,
        low_stock=[p for p in products if p.stock <= low_stock_threshold],
    )
