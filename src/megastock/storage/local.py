# src/megastock/storage/local.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import TypeAdapter

from megastock.core.metrics import LOCAL_STORAGE_FAILURES
from megastock.domain.models import Product, duplicate_ids
from megastock.storage.backends import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "megastock_products"

T = TypeVar("T")

_COLLECTION = TypeAdapter(list[Product])


@dataclass(frozen=True)
class StorageResult(Generic[T]):
    ok: bool
    value: T | None = None
    error: Exception | None = None


class LocalProductStorage:
    """
    Best-effort local mirror of the product collection.

    The whole collection is the unit of persistence: it is written as one JSON
    array under a single key. ``backend=None`` means no local storage is
    available in this runtime; every operation is then a no-op.

    The ``try_*`` methods report failures through a StorageResult. The plain
    methods log and drop the failure, so callers cannot tell a failed write
    from a successful one.
    """

    def __init__(self, backend: KeyValueStorage | None, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._backend = backend
        self._key = key

    @property
    def available(self) -> bool:
        return self._backend is not None

    # ------------------------------------------------------------------
    # Explicit result channel
    # ------------------------------------------------------------------

    def try_save(self, products: list[Product]) -> StorageResult[None]:
        if self._backend is None:
            return StorageResult(ok=True)
        try:
            payload = _COLLECTION.dump_json(products).decode("utf-8")
            self._backend.set_item(self._key, payload)
        except Exception as e:
            return StorageResult(ok=False, error=e)
        return StorageResult(ok=True)

    def try_load(self) -> StorageResult[list[Product]]:
        if self._backend is None:
            return StorageResult(ok=True)
        try:
            stored = self._backend.get_item(self._key)
            if not stored:
                return StorageResult(ok=True)
            products = _COLLECTION.validate_json(stored)
            duplicates = duplicate_ids(products)
            if duplicates:
                raise ValueError(f"Duplicate product ids: {duplicates}")
            return StorageResult(ok=True, value=products)
        except Exception as e:
            return StorageResult(ok=False, error=e)

    def try_clear(self) -> StorageResult[None]:
        if self._backend is None:
            return StorageResult(ok=True)
        try:
            self._backend.remove_item(self._key)
        except Exception as e:
            return StorageResult(ok=False, error=e)
        return StorageResult(ok=True)

    # ------------------------------------------------------------------
    # Silent API used by ProductStore
    # ------------------------------------------------------------------

    def save(self, products: list[Product]) -> None:
        result = self.try_save(products)
        if not result.ok:
            self._report("save", result)

    def load(self) -> list[Product] | None:
        result = self.try_load()
        if not result.ok:
            self._report("load", result)
            return None
        return result.value

    def clear(self) -> None:
        result = self.try_clear()
        if not result.ok:
            self._report("clear", result)

    def _report(self, operation: str, result: StorageResult) -> None:
        LOCAL_STORAGE_FAILURES.labels(operation=operation).inc()
        logger.error(
            "Error during local storage %s of key '%s'",
            operation,
            self._key,
            exc_info=result.error,
        )
