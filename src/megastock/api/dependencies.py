# src/megastock/api/dependencies.py
from functools import lru_cache

import httpx
from fastapi import Depends

from megastock.adapters.supabase import create_client
from megastock.core.config import Settings, get_settings
from megastock.domain.ports import RemoteProductStorePort
from megastock.services.inventory_service import InventoryService
from megastock.services.product_store import ProductStore
from megastock.storage.backends import FileStorage, InMemoryStorage, KeyValueStorage
from megastock.storage.local import LocalProductStorage


# Shared HTTP Client (Connection Pooling)
@lru_cache
def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": "MegaStock/1.0"},
        follow_redirects=True,
    )


def build_storage_backend(settings: Settings) -> KeyValueStorage | None:
    if settings.storage_backend == "memory":
        return InMemoryStorage()
    if settings.storage_backend == "file":
        return FileStorage(settings.storage_dir)
    return None


def get_remote_store(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> RemoteProductStorePort | None:
    """Raises ConfigurationError when the remote store is enabled but not configured."""
    if not settings.remote_store_enabled:
        return None
    return create_client(settings, client)


# Singleton Product Store (owns the in-memory collection for the process)
_product_store: ProductStore | None = None


def get_product_store(
    remote: RemoteProductStorePort | None = Depends(get_remote_store),
    settings: Settings = Depends(get_settings),
) -> ProductStore:
    global _product_store
    if _product_store is None:
        local = LocalProductStorage(
            backend=build_storage_backend(settings),
            key=settings.storage_key,
        )
        _product_store = ProductStore(local=local, remote=remote)
    return _product_store


def reset_product_store() -> None:
    """Drops the singleton so the next request builds a store around a fresh HTTP client."""
    global _product_store
    _product_store = None


def get_inventory_service(
    store: ProductStore = Depends(get_product_store),
    settings: Settings = Depends(get_settings),
) -> InventoryService:
    return InventoryService(store=store, low_stock_threshold=settings.low_stock_threshold)
