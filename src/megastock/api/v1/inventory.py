from typing import Annotated

from fastapi import APIRouter, Depends, Security

from megastock.api.dependencies import get_inventory_service, get_product_store
from megastock.core.security import get_user_role, require_admin
from megastock.domain.models import InventorySummary, Product, UserRole
from megastock.services.inventory_service import InventoryService
from megastock.services.product_store import ProductStore

router = APIRouter(prefix="/inventory", tags=["Inventory"])

ReaderDep = Annotated[UserRole, Security(get_user_role)]
ServiceDep = Annotated[InventoryService, Depends(get_inventory_service)]


@router.get("/summary", response_model=InventorySummary)
async def get_summary(role: ReaderDep, service: ServiceDep) -> InventorySummary:
    """Total inventory value (price x stock), broken down by brand."""
    return await service.get_summary()


@router.get("/low-stock", response_model=list[Product])
async def get_low_stock(role: ReaderDep, service: ServiceDep) -> list[Product]:
    return await service.get_low_stock()


@router.post("/reset", response_model=list[Product])
async def reset_local_cache(
    role: Annotated[UserRole, Security(require_admin)],
    store: Annotated[ProductStore, Depends(get_product_store)],
) -> list[Product]:
    """Clears the local mirror and reloads the collection."""
    return await store.reset()
