# src/megastock/domain/ports.py
from abc import ABC, abstractmethod

from megastock.domain.models import Product


class RemoteProductStorePort(ABC):
    """
    Abstract interface for the remote product store.
    ProductStore only knows this interface, never the concrete client.
    """

    @abstractmethod
    async def fetch_all(self) -> list[Product]:
        """
        Returns the complete product list, sorted by ascending id.

        Raises:
            RemoteStoreError: On transport failures, error responses or a
                malformed body.
        """
        ...

    @abstractmethod
    async def save_all(self, products: list[Product]) -> None:
        """Writes the complete product list (upsert by id)."""
        ...


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Required configuration is missing. Fatal, never retried."""


class ProductValidationError(Exception):
    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid value for '{field}': {reason}")
        self.field = field
        self.reason = reason


class ProductNotFoundError(Exception):
    def __init__(self, product_id: int):
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class InsufficientStockError(Exception):
    def __init__(self, product_id: int, available: int, requested: int):
        super().__init__(
            f"Not enough stock for product '{product_id}'. "
            f"Available: {available}, requested: {requested}"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class RemoteStoreError(Exception):
    def __init__(self, detail: str):
        super().__init__(f"Remote store error: {detail}")
        self.detail = detail
