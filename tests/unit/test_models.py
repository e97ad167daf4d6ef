# tests/unit/test_models.py
from decimal import Decimal

import pytest
from pydantic import ValidationError

from megastock.domain.catalog import BRANDS, SEED_PRODUCTS, seed_catalog
from megastock.domain.models import DEFAULT_IMAGE, Brand, Product, ProductCreate, duplicate_ids


def test_product_defaults_image_and_color():
    product = Product(id=1, name="Mesa", brand=Brand.DJ, stock=0, price=Decimal("0"))

    assert product.image == DEFAULT_IMAGE
    assert product.color is None


def test_product_accepts_brand_by_value():
    product = Product.model_validate(
        {"id": 7, "name": "Placard", "brand": "Super Espuma", "stock": 1, "price": "10.50"}
    )
    assert product.brand is Brand.SUPER_ESPUMA
    assert product.price == Decimal("10.50")


@pytest.mark.parametrize(
    "field,value",
    [
        ("stock", -1),
        ("price", Decimal("-0.01")),
        ("brand", "Ikea"),
        ("id", 0),
        ("name", ""),
    ],
)
def test_product_rejects_invalid_fields(field, value):
    data = {"id": 1, "name": "Silla", "brand": "DJ", "stock": 3, "price": Decimal("50")}
    data[field] = value

    with pytest.raises(ValidationError):
        Product.model_validate(data)


def test_product_is_frozen():
    product = SEED_PRODUCTS[0]
    with pytest.raises(ValidationError):
        product.price = Decimal("1")  # type: ignore[misc]


def test_product_create_does_not_enforce_business_rules():
    # Validation is ProductStore's job; the request schema only parses types.
    payload = ProductCreate(name="Silla", brand="Unknown", stock=-5, price=Decimal("-1"))
    assert payload.stock == -5


def test_seed_catalog_has_four_products_with_sequential_ids():
    products = seed_catalog()
    assert [p.id for p in products] == [1, 2, 3, 4]
    assert products[1].name == "Mesa de Centro de Nogal"
    assert products[1].price == Decimal("249.99")


def test_seed_catalog_returns_independent_lists():
    first = seed_catalog()
    first.append(first[0])
    assert len(seed_catalog()) == 4


def test_brand_set():
    assert len(BRANDS) == 8
    assert Brand("San Jose") in BRANDS


def test_duplicate_ids_in_order_of_first_repetition():
    products = seed_catalog()
    collection = products + [products[2], products[0], products[2]]

    assert duplicate_ids(collection) == [3, 1]
    assert duplicate_ids(products) == []
