"""Turns an edited product aggregate into an outbound API payload.

Each child record is classified against the last-known-persisted aggregate:
a record whose id exists in the original collection is an update and keeps
its id; every other record is an insert and is sent without an id key.
"""

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from pydantic.alias_generators import to_camel

from product_console.domain.entities import CHILD_COLLECTIONS, Product

logger = logging.getLogger(__name__)

PRODUCT_NUMERIC_FIELDS = frozenset({
    "buying_price", "retail_price", "wholesale_price",
    "width", "height", "length", "weight", "volumetric_weight",
    "items_per_unit",
})
CHILD_NUMERIC_FIELDS: dict[str, frozenset[str]] = {
    "variants": frozenset({
        "buying_price", "retail_price", "wholesale_price", "stock_quantity",
        "reorder_point", "reorder_qty", "weight",
    }),
    "suppliers": frozenset({"cost_price", "minimum_order_quantity"}),
}


class ChildDeletionPolicy(str, Enum):
    """How children present in the original but absent from the edit are removed.

    FULL_REPLACE: the API replaces child collections wholesale on update, so
        omitting a child deletes it.
    EXPLICIT_DELETE: the API merges children additively, so each removed
        child id needs its own delete call.
    """

    FULL_REPLACE = "full_replace"
    EXPLICIT_DELETE = "explicit_delete"


@dataclass
class ReconciliationResult:
    """Outbound payload plus the child ids that disappeared from the edit."""

    payload: dict[str, Any]
    removed_ids: dict[str, list[str]] = field(default_factory=dict)
    policy: ChildDeletionPolicy = ChildDeletionPolicy.FULL_REPLACE

    @property
    def pending_deletes(self) -> list[tuple[str, str]]:
        """(collection, child_id) pairs that need an explicit delete call."""
        if self.policy is not ChildDeletionPolicy.EXPLICIT_DELETE:
            return []
        return [
            (collection, child_id)
            for collection in CHILD_COLLECTIONS
            for child_id in self.removed_ids.get(collection, [])
        ]


def normalize_number(value: Any) -> Any:
    """Blank text becomes None; numeric text becomes int or float.

    Anything else is returned unchanged so validation can report it.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return value
        if number != number:  # NaN
            return None
        return number
    if isinstance(value, float) and value != value:
        return None
    return value


def _to_wire(record: dict[str, Any], numeric_fields: frozenset[str]) -> dict[str, Any]:
    return {
        to_camel(key): normalize_number(value) if key in numeric_fields else value
        for key, value in record.items()
    }


class ProductReconciler:
    """Builds the create/update body for a product aggregate.

    Deterministic: the same (original, edited) pair always yields an equal
    payload with the same key order.
    """

    def __init__(self, deletion_policy: ChildDeletionPolicy = ChildDeletionPolicy.FULL_REPLACE):
        self._policy = ChildDeletionPolicy(deletion_policy)

    @property
    def deletion_policy(self) -> ChildDeletionPolicy:
        return self._policy

    def reconcile(self, original: Product | None, edited: Product) -> ReconciliationResult:
        """Reconcile ``edited`` against ``original`` (None in create mode)."""
        scalars = {
            name: getattr(edited, name)
            for name in Product.scalar_field_names()
            if name != "id"
        }
        payload = _to_wire(_copy_value(scalars), PRODUCT_NUMERIC_FIELDS)

        removed_ids: dict[str, list[str]] = {}
        for collection in CHILD_COLLECTIONS:
            original_children = original.children(collection) if original else []
            edited_children = edited.children(collection)
            payload[collection] = self.reconcile_children(
                collection, original_children, edited_children
            )
            removed_ids[collection] = self._removed_ids(original_children, edited_children)

        logger.debug(
            "Reconciled product %s: %s",
            edited.id or "<new>",
            {
                c: f"{len(payload[c])} sent, {len(removed_ids[c])} removed"
                for c in CHILD_COLLECTIONS
            },
        )
        return ReconciliationResult(payload=payload, removed_ids=removed_ids, policy=self._policy)

    def reconcile_children(
        self, collection: str, original_children: list, edited_children: list
    ) -> list[dict[str, Any]]:
        """Classify every edited child as update (keeps id) or insert (no id key)."""
        known_ids = {child.id for child in original_children if child.id}
        numeric_fields = CHILD_NUMERIC_FIELDS[collection]

        records: list[dict[str, Any]] = []
        for child in edited_children:
            data = asdict(child)
            child_id = data.pop("id", None)
            record = _to_wire(data, numeric_fields)
            if child_id and child_id in known_ids:
                record = {"id": child_id, **record}
            records.append(record)
        return records

    @staticmethod
    def _removed_ids(original_children: list, edited_children: list) -> list[str]:
        kept = {child.id for child in edited_children if child.id}
        return [child.id for child in original_children if child.id and child.id not in kept]


def _copy_value(value: Any) -> Any:
    """Copy nested maps and lists so the payload never aliases the aggregate."""
    if isinstance(value, dict):
        return {k: _copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy_value(v) for v in value]
    return value
