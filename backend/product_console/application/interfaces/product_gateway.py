"""Abstract product persistence interface (port) for the remote products API."""

from abc import ABC, abstractmethod
from typing import Any

from product_console.domain.entities import Product


class ProductGateway(ABC):
    """Port for product persistence — implemented in the infrastructure layer.

    Payloads are the camelCase bodies produced by the reconciler. Write
    operations raise ``PersistenceFieldError`` when the API names rejected
    fields and ``PersistenceError`` for every other failure.
    """

    @abstractmethod
    async def get(self, product_id: str) -> Product | None:
        """Fetch a product with its variants and suppliers, or None if absent."""
        ...

    @abstractmethod
    async def create(self, payload: dict[str, Any]) -> Product:
        """Create a product and return its persisted representation."""
        ...

    @abstractmethod
    async def update(self, product_id: str, payload: dict[str, Any]) -> Product:
        """Update a product and return its persisted representation."""
        ...

    @abstractmethod
    async def delete_child(self, collection: str, product_id: str, child_id: str) -> None:
        """Delete one variant or supplier link. A child that is already gone is not an error."""
        ...
