"""Categories, warehouse locations and suppliers read from the console API."""

import logging
from typing import Any

import httpx

from product_console.application.interfaces import ReferenceDataProvider
from product_console.domain.entities import ReferenceItem
from product_console.domain.exceptions import ReferenceDataError
from product_console.infrastructure.remote._http import RemoteApiClient, error_message, read_json, unwrap

logger = logging.getLogger(__name__)


class HttpReferenceDataProvider(RemoteApiClient, ReferenceDataProvider):
    """Each list endpoint may answer with a bare list or ``{"data": {"<resource>": [...]}}``."""

    page_limit = 100

    async def list_categories(self) -> list[ReferenceItem]:
        return await self._list("categories")

    async def list_locations(self) -> list[ReferenceItem]:
        return await self._list("locations")

    async def list_suppliers(self) -> list[ReferenceItem]:
        return await self._list("suppliers")

    async def _list(self, resource: str) -> list[ReferenceItem]:
        try:
            response = await self._request("GET", f"/{resource}", params={"limit": self.page_limit})
        except httpx.HTTPError as exc:
            raise ReferenceDataError(resource, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise ReferenceDataError(resource, error_message(response, f"HTTP {response.status_code}"))

        records = self._extract_records(unwrap(read_json(response)), resource)
        if records is None:
            raise ReferenceDataError(resource, "Unexpected response format")

        items = [
            ReferenceItem(id=str(r["id"]), name=str(r.get("name") or r["id"]))
            for r in records
            if isinstance(r, dict) and r.get("id") is not None
        ]
        logger.debug("Loaded %d %s", len(items), resource)
        return items

    @staticmethod
    def _extract_records(data: Any, resource: str) -> list | None:
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get(resource), list):
            return data[resource]
        return None
