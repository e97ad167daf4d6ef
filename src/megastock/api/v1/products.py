from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Security, status

from megastock.api.dependencies import get_product_store
from megastock.core.security import get_user_role, require_admin
from megastock.domain.models import (
    Brand,
    BulkPriceUpdate,
    PriceUpdate,
    Product,
    ProductCreate,
    SaleCreate,
    StockIncrement,
    UserRole,
)
from megastock.domain.ports import (
    InsufficientStockError,
    ProductNotFoundError,
    ProductValidationError,
    RemoteStoreError,
)
from megastock.services.product_store import ProductStore

router = APIRouter(prefix="/products", tags=["Products"])

ReaderDep = Annotated[UserRole, Security(get_user_role)]
AdminDep = Annotated[UserRole, Security(require_admin)]
StoreDep = Annotated[ProductStore, Depends(get_product_store)]


def _to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, ProductValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": e.field, "reason": e.reason},
        )
    if isinstance(e, ProductNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, InsufficientStockError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


_DOMAIN_ERRORS = (
    ProductValidationError,
    ProductNotFoundError,
    InsufficientStockError,
    RemoteStoreError,
)


@router.get("/", response_model=list[Product])
async def list_products(
    role: ReaderDep,
    store: StoreDep,
    brand: Brand | None = Query(default=None),
) -> list[Product]:
    """Product table. Optionally filtered by brand, insertion order preserved."""
    products = await store.get_all()
    if brand is not None:
        products = [p for p in products if p.brand == brand]
    return products


@router.get("/{product_id}", response_model=Product)
async def get_product(role: ReaderDep, store: StoreDep, product_id: int) -> Product:
    """Product card."""
    try:
        return await store.get(product_id)
    except ProductNotFoundError as e:
        raise _to_http_error(e)


@router.post("/", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(role: AdminDep, store: StoreDep, payload: ProductCreate) -> Product:
    """New-product form. The id is assigned by the store."""
    try:
        return await store.add(payload)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)


@router.patch("/prices", response_model=list[Product])
async def bulk_update_prices(
    role: AdminDep, store: StoreDep, payload: BulkPriceUpdate
) -> list[Product]:
    """Updates several prices at once; nothing changes if any entry is rejected."""
    try:
        return await store.bulk_update_prices(payload.updates)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)


@router.patch("/{product_id}/price", response_model=Product)
async def update_price(
    role: AdminDep, store: StoreDep, product_id: int, payload: PriceUpdate
) -> Product:
    """Price-update form."""
    try:
        return await store.update_price(product_id, payload.price)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)


@router.post("/{product_id}/stock", response_model=Product)
async def increment_stock(
    role: AdminDep, store: StoreDep, product_id: int, payload: StockIncrement
) -> Product:
    try:
        return await store.increment_stock(product_id, payload.quantity)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)


@router.post("/{product_id}/sales", response_model=Product)
async def register_sale(
    role: AdminDep, store: StoreDep, product_id: int, payload: SaleCreate
) -> Product:
    """Registers a sale and decrements stock."""
    try:
        return await store.register_sale(product_id, payload.quantity)
    except _DOMAIN_ERRORS as e:
        raise _to_http_error(e)
