"""Abstract interface (port) for read-only lookup data."""

from abc import ABC, abstractmethod

from product_console.domain.entities import ReferenceItem


class ReferenceDataProvider(ABC):
    """Port for categories, warehouse locations and suppliers.

    Every method raises ReferenceDataError when the lookup fails.
    """

    @abstractmethod
    async def list_categories(self) -> list[ReferenceItem]:
        ...

    @abstractmethod
    async def list_locations(self) -> list[ReferenceItem]:
        ...

    @abstractmethod
    async def list_suppliers(self) -> list[ReferenceItem]:
        ...
