# tests/unit/test_product_store.py
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from megastock.domain.catalog import seed_catalog
from megastock.domain.models import Brand, PriceChange, Product, ProductCreate
from megastock.domain.ports import (
    InsufficientStockError,
    ProductNotFoundError,
    ProductValidationError,
    RemoteProductStorePort,
    RemoteStoreError,
)
from megastock.services.product_store import ProductStore
from megastock.storage.backends import InMemoryStorage
from megastock.storage.local import LocalProductStorage


@pytest.fixture
def local() -> LocalProductStorage:
    return LocalProductStorage(backend=InMemoryStorage())


@pytest.fixture
def remote() -> AsyncMock:
    return AsyncMock(spec=RemoteProductStorePort)


@pytest.fixture
def store(local: LocalProductStorage) -> ProductStore:
    return ProductStore(local=local)


def _new_chair(**overrides) -> ProductCreate:
    data = {"name": "Silla Nueva", "brand": "DJ", "stock": 3, "price": Decimal("50.0")}
    data.update(overrides)
    return ProductCreate(**data)


# ---------------------------------------------------------------------------
# Resolution order
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_all_falls_back_to_seed_catalog(store: ProductStore, local: LocalProductStorage):
    assert local.load() is None
    products = await store.get_all()
    assert products == seed_catalog()


@pytest.mark.asyncio
async def test_get_all_prefers_local_over_seed(local: LocalProductStorage):
    stored = [Product(id=10, name="Cama", brand=Brand.PIERO, stock=1, price=Decimal("5"))]
    local.save(stored)

    products = await ProductStore(local=local).get_all()

    assert products == stored


@pytest.mark.asyncio
async def test_get_all_prefers_remote_over_local(local: LocalProductStorage, remote: AsyncMock):
    local.save(seed_catalog())
    remote_products = [Product(id=3, name="Sofá", brand=Brand.MOVAL, stock=2, price=Decimal("9"))]
    remote.fetch_all.return_value = remote_products

    products = await ProductStore(local=local, remote=remote).get_all()

    assert products == remote_products


@pytest.mark.asyncio
async def test_get_all_falls_back_when_remote_unreachable(
    local: LocalProductStorage, remote: AsyncMock
):
    stored = [Product(id=10, name="Cama", brand=Brand.PIERO, stock=1, price=Decimal("5"))]
    local.save(stored)
    remote.fetch_all.side_effect = RemoteStoreError("Connection error")

    products = await ProductStore(local=local, remote=remote).get_all()

    assert products == stored


@pytest.mark.asyncio
async def test_get_all_returns_a_copy(store: ProductStore):
    products = await store.get_all()
    products.clear()
    assert len(await store.get_all()) == 4


@pytest.mark.asyncio
async def test_session_collection_survives_without_local_backend():
    store = ProductStore(local=LocalProductStorage(backend=None))

    await store.add(_new_chair())

    assert len(await store.get_all()) == 5


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_add_assigns_next_id_and_persists(store: ProductStore, local: LocalProductStorage):
    product = await store.add(_new_chair())

    assert product.id == 5
    assert product.brand == Brand.DJ
    assert product.stock == 3
    assert product.price == Decimal("50.0")

    products = await store.get_all()
    assert [p for p in products if p.name == "Silla Nueva"] == [product]
    assert local.load() == products


@pytest.mark.asyncio
async def test_add_ids_follow_current_max(local: LocalProductStorage):
    local.save([Product(id=41, name="Mesa", brand=Brand.DJ, stock=1, price=Decimal("1"))])
    store = ProductStore(local=local)

    first = await store.add(_new_chair())
    second = await store.add(_new_chair(name="Otra"))

    assert (first.id, second.id) == (42, 43)


@pytest.mark.asyncio
async def test_add_to_empty_collection_starts_at_one(local: LocalProductStorage):
    store = ProductStore(local=local, seed=list)
    product = await store.add(_new_chair())
    assert product.id == 1


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"stock": -1}, "stock"),
        ({"price": Decimal("-0.5")}, "price"),
        ({"brand": "Ikea"}, "brand"),
        ({"name": ""}, "name"),
    ],
)
@pytest.mark.asyncio
async def test_add_rejects_invalid_payload_without_mutation(
    store: ProductStore, local: LocalProductStorage, overrides: dict, field: str
):
    before = await store.get_all()

    with pytest.raises(ProductValidationError) as exc_info:
        await store.add(_new_chair(**overrides))

    assert exc_info.value.field == field
    assert exc_info.value.reason
    assert await store.get_all() == before
    assert local.load() is None


# ---------------------------------------------------------------------------
# update_price
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_price_changes_only_price(store: ProductStore, local: LocalProductStorage):
    original = (await store.get_all())[1]

    updated = await store.update_price(2, Decimal("199.99"))

    assert updated.price == Decimal("199.99")
    assert updated.model_dump(exclude={"price"}) == original.model_dump(exclude={"price"})
    products = await store.get_all()
    assert products[1] == updated
    assert products[0] == seed_catalog()[0]
    assert local.load() == products


@pytest.mark.asyncio
async def test_update_price_unknown_id(store: ProductStore, local: LocalProductStorage):
    with pytest.raises(ProductNotFoundError) as exc_info:
        await store.update_price(99, Decimal("10"))

    assert exc_info.value.product_id == 99
    assert await store.get_all() == seed_catalog()
    assert local.load() is None


@pytest.mark.asyncio
async def test_update_price_rejects_negative(store: ProductStore):
    with pytest.raises(ProductValidationError) as exc_info:
        await store.update_price(1, Decimal("-1"))

    assert exc_info.value.field == "price"
    assert (await store.get_all())[0].price == Decimal("75.99")


@pytest.mark.asyncio
async def test_update_price_to_zero_is_allowed(store: ProductStore):
    updated = await store.update_price(1, Decimal("0"))
    assert updated.price == Decimal("0")


@pytest.mark.asyncio
async def test_update_price_stores_float_input_as_decimal(
    store: ProductStore, local: LocalProductStorage
):
    updated = await store.update_price(2, 199.99)  # type: ignore[arg-type]

    assert isinstance(updated.price, Decimal)
    assert updated.price.quantize(Decimal("0.01")) == Decimal("199.99")
    assert isinstance((await store.get_all())[1].price, Decimal)
    assert local.load() == await store.get_all()


# ---------------------------------------------------------------------------
# Stock and sales
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_increment_stock(store: ProductStore):
    updated = await store.increment_stock(3, 4)
    assert updated.stock == 9


@pytest.mark.asyncio
async def test_increment_stock_rejects_non_positive_quantity(store: ProductStore):
    with pytest.raises(ProductValidationError) as exc_info:
        await store.increment_stock(3, 0)
    assert exc_info.value.field == "quantity"


@pytest.mark.asyncio
async def test_register_sale_decrements_stock(store: ProductStore, local: LocalProductStorage):
    updated = await store.register_sale(3, 5)

    assert updated.stock == 0
    stored = local.load()
    assert stored is not None
    assert stored[2].stock == 0


@pytest.mark.asyncio
async def test_register_sale_insufficient_stock(store: ProductStore):
    with pytest.raises(InsufficientStockError) as exc_info:
        await store.register_sale(3, 6)

    assert exc_info.value.available == 5
    assert (await store.get_all())[2].stock == 5


@pytest.mark.asyncio
async def test_register_sale_unknown_product(store: ProductStore):
    with pytest.raises(ProductNotFoundError):
        await store.register_sale(77, 1)


# ---------------------------------------------------------------------------
# Bulk price update
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_bulk_update_prices(store: ProductStore):
    updated = await store.bulk_update_prices(
        [
            PriceChange(product_id=1, price=Decimal("80")),
            PriceChange(product_id=4, price=Decimal("130")),
        ]
    )

    assert [p.price for p in updated] == [Decimal("80"), Decimal("130")]
    prices = [p.price for p in await store.get_all()]
    assert prices == [Decimal("80"), Decimal("249.99"), Decimal("899.99"), Decimal("130")]


@pytest.mark.asyncio
async def test_bulk_update_prices_is_all_or_nothing(store: ProductStore):
    with pytest.raises(ProductNotFoundError):
        await store.bulk_update_prices(
            [
                PriceChange(product_id=1, price=Decimal("80")),
                PriceChange(product_id=99, price=Decimal("130")),
            ]
        )

    assert await store.get_all() == seed_catalog()


# ---------------------------------------------------------------------------
# Write-through to the remote store
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_mutations_write_through_to_remote(local: LocalProductStorage, remote: AsyncMock):
    remote.fetch_all.return_value = seed_catalog()
    store = ProductStore(local=local, remote=remote)

    product = await store.add(_new_chair())

    remote.save_all.assert_awaited_once()
    (written,) = remote.save_all.await_args.args
    assert written[-1] == product
    assert local.load() == written


@pytest.mark.asyncio
async def test_remote_write_failure_propagates_after_local_mirror(
    local: LocalProductStorage, remote: AsyncMock
):
    remote.fetch_all.return_value = seed_catalog()
    remote.save_all.side_effect = RemoteStoreError("503 Service Unavailable")
    store = ProductStore(local=local, remote=remote)

    with pytest.raises(RemoteStoreError):
        await store.update_price(2, Decimal("199.99"))

    stored = local.load()
    assert stored is not None
    assert stored[1].price == Decimal("199.99")


@pytest.mark.asyncio
async def test_reset_clears_local_mirror(store: ProductStore, local: LocalProductStorage):
    await store.add(_new_chair())
    assert local.load() is not None

    products = await store.reset()

    assert local.load() is None
    assert products == seed_catalog()


# ---------------------------------------------------------------------------
# Collection integrity
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_all_ignores_local_mirror_with_duplicate_ids(local: LocalProductStorage):
    first = seed_catalog()[0]
    local.save([first, first.model_copy(update={"name": "Copia"})])

    products = await ProductStore(local=local).get_all()

    assert products == seed_catalog()


@pytest.mark.asyncio
async def test_stock_changes_keep_records_valid(store: ProductStore):
    updated = await store.increment_stock(1, 3)

    assert isinstance(updated, Product)
    assert updated.stock == 15
    assert updated.price == Decimal("75.99")
