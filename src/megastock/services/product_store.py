# src/megastock/services/product_store.py
from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal

from pydantic import ValidationError

from megastock.core.metrics import PRODUCT_RESOLUTIONS
from megastock.domain.catalog import seed_catalog
from megastock.domain.models import PriceChange, Product, ProductCreate
from megastock.domain.ports import (
    InsufficientStockError,
    ProductNotFoundError,
    ProductValidationError,
    RemoteProductStorePort,
    RemoteStoreError,
)
from megastock.storage.local import LocalProductStorage

logger = logging.getLogger(__name__)


class ProductStore:
    """
    Single entry point for product data.

    Reads resolve in a fixed order: remote store (when one is configured and
    answers), then the local mirror, then the seed catalog. Once loaded, the
    in-memory collection is owned by this instance; without a reachable remote
    store it is served as-is for the rest of the process.

    Every mutation writes the whole collection back to the local mirror and,
    when configured, to the remote store. There is no locking; the last write
    wins.
    """

    def __init__(
        self,
        local: LocalProductStorage,
        remote: RemoteProductStorePort | None = None,
        seed: Callable[[], list[Product]] = seed_catalog,
    ) -> None:
        self._local = local
        self._remote = remote
        self._seed = seed
        self._products: list[Product] | None = None

    async def get_all(self) -> list[Product]:
        remote_products = await self._fetch_remote()
        if remote_products is not None:
            self._products = remote_products
        elif self._products is None:
            self._products = self._load_local_or_seed()
        return list(self._products)

    async def get(self, product_id: int) -> Product:
        products = await self.get_all()
        return products[self._index_of(products, product_id)]

    async def add(self, payload: ProductCreate) -> Product:
        products = await self._collection()
        next_id = max((p.id for p in products), default=0) + 1
        product = _build_product(id=next_id, **payload.model_dump())

        products.append(product)
        await self._persist(products)
        logger.info("Added product %s (%s)", product.id, product.name)
        return product

    async def update_price(self, product_id: int, new_price: Decimal) -> Product:
        products = await self._collection()
        index = self._index_of(products, product_id)
        _check_price(new_price)

        updated = _replace(products[index], price=new_price)
        products[index] = updated
        await self._persist(products)
        return updated

    async def bulk_update_prices(self, changes: list[PriceChange]) -> list[Product]:
        """Applies all price changes or none of them; the collection is persisted once."""
        products = await self._collection()
        replacements = []
        for change in changes:
            index = self._index_of(products, change.product_id)
            _check_price(change.price)
            replacements.append((index, _replace(products[index], price=change.price)))

        for index, updated in replacements:
            products[index] = updated
        await self._persist(products)
        return [products[index] for index, _ in replacements]

    async def increment_stock(self, product_id: int, quantity: int) -> Product:
        products = await self._collection()
        index = self._index_of(products, product_id)
        _check_quantity(quantity)

        current = products[index]
        updated = _replace(current, stock=current.stock + quantity)
        products[index] = updated
        await self._persist(products)
        return updated

    async def register_sale(self, product_id: int, quantity: int) -> Product:
        products = await self._collection()
        index = self._index_of(products, product_id)
        _check_quantity(quantity)

        current = products[index]
        if quantity > current.stock:
            raise InsufficientStockError(product_id, available=current.stock, requested=quantity)

        updated = _replace(current, stock=current.stock - quantity)
        products[index] = updated
        await self._persist(products)
        logger.info("Registered sale of %d x product %s", quantity, product_id)
        return updated

    async def reset(self) -> list[Product]:
        """Drops the local mirror and resolves the collection again."""
        self._local.clear()
        self._products = None
        return await self.get_all()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _collection(self) -> list[Product]:
        if self._products is None:
            self._products = await self.get_all()
        return self._products

    async def _fetch_remote(self) -> list[Product] | None:
        if self._remote is None:
            return None
        try:
            products = await self._remote.fetch_all()
        except RemoteStoreError:
            logger.warning("Remote store unreachable, falling back to local storage", exc_info=True)
            return None
        PRODUCT_RESOLUTIONS.labels(source="remote").inc()
        return products

    def _load_local_or_seed(self) -> list[Product]:
        stored = self._local.load()
        if stored is not None:
            PRODUCT_RESOLUTIONS.labels(source="local").inc()
            return stored

        PRODUCT_RESOLUTIONS.labels(source="seed").inc()
        return self._seed()

    async def _persist(self, products: list[Product]) -> None:
        self._local.save(products)
        if self._remote is not None:
            await self._remote.save_all(products)

    @staticmethod
    def _index_of(products: list[Product], product_id: int) -> int:
        for index, product in enumerate(products):
            if product.id == product_id:
                return index
        raise ProductNotFoundError(product_id)


def _build_product(**fields: object) -> Product:
    try:
        return Product.model_validate(fields)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "product"
        raise ProductValidationError(field, error["msg"]) from e


def _replace(product: Product, **changes: object) -> Product:
    """Copy of ``product`` with ``changes`` applied, validated like a new record."""
    return _build_product(**{**product.model_dump(), **changes})


def _check_price(price: Decimal) -> None:
    if price < 0:
        raise ProductValidationError("price", "Price must not be negative")


def _check_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ProductValidationError("quantity", "Quantity must be greater than zero")
