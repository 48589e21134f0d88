"""Loads the lookup data the product edit screen needs (categories, locations, suppliers)."""

import asyncio
import logging

from product_console.application.interfaces import ReferenceDataProvider
from product_console.application.services.listing_cache import ListingCache
from product_console.domain.entities import LoadStatus, ReferenceData
from product_console.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ProductEditPipeline")


class ReferenceDataService:
    """Fetches all three lookups concurrently and reports a single tri-state.

    Any failing lookup turns the whole result into ``LoadStatus.ERROR``,
    which blocks the edit screen.
    """

    def __init__(self, provider: ReferenceDataProvider, cache: ListingCache | None = None):
        self._provider = provider
        self._cache = cache or ListingCache()

    async def load(self) -> ReferenceData:
        plog.step_start(PipelineStage.REFERENCE, "Loading categories, locations and suppliers")
        results = await asyncio.gather(
            self._cache.get_or_load("categories", self._provider.list_categories),
            self._cache.get_or_load("locations", self._provider.list_locations),
            self._cache.get_or_load("suppliers", self._provider.list_suppliers),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            first = errors[0]
            if not isinstance(first, Exception):
                raise first
            plog.step_error(PipelineStage.ERROR, "Reference data unavailable", error=first)
            return ReferenceData(status=LoadStatus.ERROR, error=str(first))

        categories, locations, suppliers = results
        plog.step_complete(
            PipelineStage.REFERENCE,
            "Reference data loaded",
            categories=len(categories),
            locations=len(locations),
            suppliers=len(suppliers),
        )
        return ReferenceData(
            status=LoadStatus.READY,
            categories=categories,
            locations=locations,
            suppliers=suppliers,
        )
