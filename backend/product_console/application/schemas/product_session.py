"""Pydantic DTOs for the product edit session endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionCreateRequest(_CamelModel):
    """Start a session; omit ``productId`` to create a new product."""

    product_id: str | None = Field(None, examples=["prod_123"])


class EditorOpenRequest(_CamelModel):
    """Open a child editor; omit ``index`` to add a new record."""

    index: int | None = Field(None, ge=0)


class SessionResponse(BaseModel):
    """Full session view returned by every session endpoint.

    Nested product and editor data keep snake_case field names, the same
    names used in ``field_errors`` paths such as ``variants.0.sku``.
    """

    id: str
    mode: str
    product: dict[str, Any]
    submission_state: str
    field_errors: dict[str, str] = Field(default_factory=dict)
    general_error: str | None = None
    navigate_to: str | None = None
    pending_uploads: list[dict[str, Any]] = Field(default_factory=list)
    editors: dict[str, dict[str, Any]] = Field(default_factory=dict)
    reference: dict[str, Any] = Field(default_factory=dict)
    notifications: list[dict[str, Any]] = Field(default_factory=list)
