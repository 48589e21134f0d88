"""Modal editing sessions for one child collection of the product aggregate.

At most one session is live per collection. The draft is a value copy of
the record being edited, so the parent list is only touched on commit.
"""

import copy
import logging
from dataclasses import asdict
from typing import Any

from pydantic import BaseModel, ValidationError

from product_console.application.schemas.product import CHILD_FORMS, collect_field_errors
from product_console.domain.entities import (
    EditorClosed,
    EditorOpenEdit,
    EditorOpenNew,
    EditorState,
    Product,
    SupplierLink,
    VariantRecord,
)
from product_console.domain.exceptions import ChildIndexError, EditorBusyError, EditorNotOpenError

logger = logging.getLogger(__name__)

_RECORD_TYPES: dict[str, type] = {
    "variants": VariantRecord,
    "suppliers": SupplierLink,
}


class ChildCollectionEditor:
    """State machine ``Closed -> OpenNew | OpenEdit(index) -> Closed``.

    Usage:
        editor = ChildCollectionEditor("variants")
        editor.open(product, index=0)
        editor.update_draft(name="Red / Large")
        editor.commit(product)
    """

    def __init__(self, collection: str, form_schema: type[BaseModel] | None = None):
        if collection not in _RECORD_TYPES:
            raise ValueError(f"Unknown child collection: {collection}")
        self._collection = collection
        self._form_schema = form_schema or CHILD_FORMS[collection]
        self._state: EditorState = EditorClosed()
        self._errors: dict[str, str] = {}

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def is_open(self) -> bool:
        return not isinstance(self._state, EditorClosed)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def draft(self) -> dict[str, Any] | None:
        if isinstance(self._state, EditorClosed):
            return None
        return copy.deepcopy(self._state.draft)

    # ── Transitions ─────────────────────────────────────────────────

    def open(self, product: Product, index: int | None = None) -> EditorState:
        """Open a session for a new record (``index=None``) or the record at ``index``.

        A session that is already open is discarded first; the new draft is
        always rebuilt from scratch.
        """
        if self.is_open:
            logger.debug("Discarding stale %s editor session", self._collection)
            self.discard()

        if index is None:
            self._state = EditorOpenNew(draft=self._default_draft())
        else:
            children = product.children(self._collection)
            self._check_index(index, len(children))
            self._state = EditorOpenEdit(
                index=index,
                draft=copy.deepcopy(asdict(children[index])),
            )
        logger.debug("Opened %s editor: %s", self._collection, self._describe_mode())
        return self._state

    def update_draft(self, **values: Any) -> None:
        """Change draft fields while the session is open. The id is not editable."""
        if isinstance(self._state, EditorClosed):
            raise EditorNotOpenError(self._collection)
        for key, value in values.items():
            if key == "id":
                continue
            if key not in self._state.draft:
                raise ValueError(f"Unknown {self._collection} field: {key}")
            self._state.draft[key] = copy.deepcopy(value)

    def commit(self, product: Product, values: dict[str, Any] | None = None) -> VariantRecord | SupplierLink | None:
        """Validate the draft and write it into ``product``.

        Returns the committed record, or None when validation failed; in
        that case the session stays open and ``errors`` holds the messages.
        """
        if isinstance(self._state, EditorClosed):
            raise EditorNotOpenError(self._collection)
        if values:
            self.update_draft(**values)

        state = self._state
        draft = dict(state.draft)
        if isinstance(state, EditorOpenNew):
            draft["id"] = None

        try:
            form = self._form_schema.model_validate(draft)
        except ValidationError as exc:
            self._errors = collect_field_errors(exc)
            logger.debug("Rejected %s commit: %s", self._collection, self._errors)
            return None

        record = form.to_entity()
        children = product.children(self._collection)
        if isinstance(state, EditorOpenEdit):
            self._check_index(state.index, len(children))
            children[state.index] = record
        else:
            children.append(record)

        logger.debug("Committed %s editor: %s", self._collection, self._describe_mode())
        self._reset()
        return record

    def discard(self) -> None:
        """Close without touching the parent aggregate."""
        self._reset()

    def remove(self, product: Product, index: int) -> VariantRecord | SupplierLink:
        """Remove the child at ``index`` directly from the collection."""
        if self.is_open:
            raise EditorBusyError(self._collection)
        children = product.children(self._collection)
        self._check_index(index, len(children))
        return children.pop(index)

    # ── Read state ──────────────────────────────────────────────────

    def describe(self) -> dict[str, Any]:
        """Derived state for the rendering layer."""
        index = self._state.index if isinstance(self._state, EditorOpenEdit) else None
        return {
            "collection": self._collection,
            "mode": self._describe_mode(),
            "index": index,
            "draft": self.draft,
            "errors": self.errors,
        }

    # ── Helpers ─────────────────────────────────────────────────────

    def _default_draft(self) -> dict[str, Any]:
        return asdict(_RECORD_TYPES[self._collection]())

    def _describe_mode(self) -> str:
        if isinstance(self._state, EditorOpenNew):
            return "new"
        if isinstance(self._state, EditorOpenEdit):
            return "edit"
        return "closed"

    def _check_index(self, index: int, size: int) -> None:
        if not 0 <= index < size:
            raise ChildIndexError(self._collection, index, size)

    def _reset(self) -> None:
        self._state = EditorClosed()
        self._errors = {}
