# src/megastock/adapters/supabase.py
from __future__ import annotations

import logging
import time

import httpx
from pydantic import ValidationError

from megastock.core.config import Settings
from megastock.core.metrics import REMOTE_STORE_COUNT, REMOTE_STORE_DURATION
from megastock.domain.models import Product, duplicate_ids
from megastock.domain.ports import ConfigurationError, RemoteProductStorePort, RemoteStoreError

logger = logging.getLogger(__name__)

_TABLE = "products"

MISSING_CONFIG_MESSAGE = (
    "Supabase environment variables missing. Please set SUPABASE_URL and "
    "SUPABASE_ANON_KEY in your environment."
)


class SupabaseProductStore(RemoteProductStorePort):
    """
    Adapter for the Supabase PostgREST endpoint holding the ``products`` table.
    Timeouts and connection handling are left to the shared httpx client.
    """

    def __init__(self, http_client: httpx.AsyncClient, url: str, anon_key: str) -> None:
        self._client = http_client
        self._endpoint = f"{url.rstrip('/')}/rest/v1/{_TABLE}"
        self._headers = {
            "apikey": anon_key,
            "Authorization": f"Bearer {anon_key}",
        }

    async def fetch_all(self) -> list[Product]:
        response = await self._request(
            "fetch_all",
            "GET",
            params={"select": "*", "order": "id.asc"},
        )

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteStoreError(f"Invalid JSON: {e}") from e
        if not isinstance(payload, list):
            raise RemoteStoreError(f"Expected a list of products, got {type(payload).__name__}")

        products = []
        for row in payload:
            try:
                products.append(Product.model_validate(row))
            except ValidationError:
                logger.warning("Skipping malformed product row from remote store", exc_info=True)

        duplicates = duplicate_ids(products)
        if duplicates:
            raise RemoteStoreError(f"Duplicate product ids: {duplicates}")
        return products

    async def save_all(self, products: list[Product]) -> None:
        await self._request(
            "save_all",
            "POST",
            json=[p.model_dump(mode="json") for p in products],
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    async def _request(
        self,
        operation: str,
        method: str,
        headers: dict[str, str] | None = None,
        **kwargs: object,
    ) -> httpx.Response:
        started = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                self._endpoint,
                headers={**self._headers, **(headers or {})},
                **kwargs,  # type: ignore[arg-type]
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            REMOTE_STORE_COUNT.labels(operation=operation, status="error").inc()
            raise RemoteStoreError(str(e)) from e
        except httpx.RequestError as e:
            REMOTE_STORE_COUNT.labels(operation=operation, status="error").inc()
            raise RemoteStoreError(f"Connection error: {e}") from e
        finally:
            REMOTE_STORE_DURATION.labels(operation=operation).observe(
                time.perf_counter() - started
            )

        REMOTE_STORE_COUNT.labels(operation=operation, status="success").inc()
        return response


def create_client(settings: Settings, http_client: httpx.AsyncClient) -> SupabaseProductStore:
    """
    Builds the remote store handle from configuration.

    Raises:
        ConfigurationError: If the service URL or the anon key is not set.
    """
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise ConfigurationError(MISSING_CONFIG_MESSAGE)
    return SupabaseProductStore(
        http_client=http_client,
        url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
    )
