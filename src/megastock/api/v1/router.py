# src/megastock/api/v1/router.py
from fastapi import APIRouter

from megastock.api.v1 import brands, inventory, products

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(products.router)
api_router.include_router(brands.router)
api_router.include_router(inventory.router)
