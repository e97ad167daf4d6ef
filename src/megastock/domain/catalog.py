# src/megastock/domain/catalog.py
from __future__ import annotations

from decimal import Decimal

from megastock.domain.models import Brand, Product

BRANDS: tuple[Brand, ...] = tuple(Brand)

SEED_PRODUCTS: tuple[Product, ...] = (
    Product(
        id=1,
        name="Silla de Comedor de Roble",
        brand=Brand.DEMOBILE,
        stock=12,
        price=Decimal("75.99"),
    ),
    Product(
        id=2,
        name="Mesa de Centro de Nogal",
        brand=Brand.MOSCONI,
        stock=8,
        price=Decimal("249.99"),
    ),
    Product(
        id=3,
        name="Sofá de Tres Plazas de Lino",
        brand=Brand.MOLUFAN,
        stock=5,
        price=Decimal("899.99"),
    ),
    Product(
        id=4,
        name="Estantería Alta de Pino",
        brand=Brand.SUPER_ESPUMA,
        stock=15,
        price=Decimal("120.00"),
    ),
)


def seed_catalog() -> list[Product]:
    """Fresh copy of the seed catalog. Products are frozen, so a shallow copy is enough."""
    return list(SEED_PRODUCTS)
