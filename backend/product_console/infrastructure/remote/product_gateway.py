"""Product persistence over the remote ``/products`` REST resource."""

import logging
from dataclasses import fields
from typing import Any

import httpx
from pydantic.alias_generators import to_snake

from product_console.application.interfaces import ProductGateway
from product_console.application.services.reconciliation_service import (
    CHILD_NUMERIC_FIELDS,
    PRODUCT_NUMERIC_FIELDS,
    normalize_number,
)
from product_console.domain.entities import SUPPLIERS, VARIANTS, Product, SupplierLink, VariantRecord
from product_console.domain.exceptions import PersistenceError, PersistenceFieldError
from product_console.infrastructure.remote._http import RemoteApiClient, error_message, read_json, unwrap

logger = logging.getLogger(__name__)

_CHILD_TYPES = {VARIANTS: VariantRecord, SUPPLIERS: SupplierLink}


def _from_wire(record_type: type, data: dict[str, Any], numeric: frozenset[str]) -> Any:
    """Build a dataclass from a camelCase record, ignoring keys it does not know."""
    known = {f.name for f in fields(record_type)} - set(_CHILD_TYPES)
    values: dict[str, Any] = {}
    for key, value in data.items():
        name = to_snake(key)
        if name not in known:
            continue
        if name in numeric and value is not None:
            value = normalize_number(value)
        values[name] = value
    return record_type(**values)


def product_from_wire(data: dict[str, Any]) -> Product:
    """Map an API product (camelCase, children inline) to the domain aggregate."""
    product = _from_wire(Product, data, PRODUCT_NUMERIC_FIELDS)
    if product.image_urls is None:
        product.image_urls = []
    for collection, record_type in _CHILD_TYPES.items():
        records = data.get(collection) or []
        setattr(product, collection, [
            _from_wire(record_type, r, CHILD_NUMERIC_FIELDS[collection])
            for r in records
            if isinstance(r, dict)
        ])
    return product


class HttpProductGateway(RemoteApiClient, ProductGateway):
    """Reads and writes products through the console API."""

    products_path = "/products"

    async def get(self, product_id: str) -> Product | None:
        response = await self._call("GET", f"{self.products_path}/{product_id}")
        if response.status_code == 404:
            return None
        return self._product_or_raise(response)

    async def create(self, payload: dict[str, Any]) -> Product:
        response = await self._call("POST", self.products_path, json=payload)
        return self._product_or_raise(response)

    async def update(self, product_id: str, payload: dict[str, Any]) -> Product:
        response = await self._call("PUT", f"{self.products_path}/{product_id}", json=payload)
        return self._product_or_raise(response)

    async def delete_child(self, collection: str, product_id: str, child_id: str) -> None:
        if collection not in _CHILD_TYPES:
            raise ValueError(f"Unknown child collection: {collection}")
        response = await self._call(
            "DELETE", f"{self.products_path}/{product_id}/{collection}/{child_id}"
        )
        if response.status_code == 404:
            logger.debug("%s %s already gone from product %s", collection, child_id, product_id)
            return
        if not response.is_success:
            self._raise_persistence_error(response)

    async def _call(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise PersistenceError(
                "Could not reach the server. Please check your connection and try again."
            ) from exc

    def _product_or_raise(self, response: httpx.Response) -> Product:
        if not response.is_success:
            self._raise_persistence_error(response)
        data = unwrap(read_json(response))
        if not isinstance(data, dict):
            raise PersistenceError("Unexpected response from server.", status_code=response.status_code)
        return product_from_wire(data)

    @staticmethod
    def _raise_persistence_error(response: httpx.Response) -> None:
        """Raise PersistenceFieldError when the body names fields, PersistenceError otherwise."""
        data = read_json(response)
        message = error_message(response, f"Request failed with status {response.status_code}")
        if isinstance(data, dict) and isinstance(data.get("fieldErrors"), dict) and data["fieldErrors"]:
            field_errors = {
                name: messages if isinstance(messages, list) else [str(messages)]
                for name, messages in data["fieldErrors"].items()
            }
            raise PersistenceFieldError(
                field_errors,
                message=message if "message" in data else "Validation failed",
                status_code=response.status_code,
            )
        raise PersistenceError(message, status_code=response.status_code)
