"""Pydantic form schemas for the product aggregate.

The forms accept raw editor input (strings from text boxes, "on"/"true"
checkbox values, JSON text for free-form maps), coerce it, and enforce the
same constraints the products API enforces. Blank numeric input becomes
``None`` rather than ``0`` or ``NaN``.
"""

import json
from dataclasses import asdict
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_snake

from product_console.domain.entities import Product, SupplierLink, VariantRecord
from product_console.domain.entities.product import DEFAULT_DIMENSION_UNIT, DEFAULT_WEIGHT_UNIT

_FORM_CONFIG = ConfigDict(loc_by_alias=False, str_strip_whitespace=True)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _parse_json_map(value: Any, label: str) -> dict[str, Any] | None:
    """Accept a mapping, JSON text, blank text or None."""
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise ValueError(f"Invalid JSON format for {label}.")
    if not isinstance(value, dict):
        raise ValueError(f"{label.capitalize()} must be a key/value map.")
    return value


class VariantForm(BaseModel):
    """One child record of ``Product.variants``."""

    model_config = _FORM_CONFIG

    id: str | None = None
    name: str = Field("", validate_default=True)
    sku: str | None = None
    barcode: str | None = None
    buying_price: float | None = Field(0, ge=0)
    retail_price: float | None = Field(None, ge=0)
    wholesale_price: float | None = Field(None, ge=0)
    stock_quantity: int | None = Field(0, ge=0)
    reorder_point: int = Field(5, ge=0)
    reorder_qty: int = Field(10, gt=0)
    is_active: bool = True
    low_stock_alert: bool = False
    attributes: dict[str, Any] | None = None
    weight: float | None = Field(None, gt=0)
    weight_unit: str = DEFAULT_WEIGHT_UNIT

    @field_validator(
        "id", "sku", "barcode", "buying_price", "retail_price",
        "wholesale_price", "stock_quantity", "weight",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("reorder_point", "reorder_qty", mode="before")
    @classmethod
    def _blank_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if _blank_to_none(value) is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("attributes", mode="before")
    @classmethod
    def _parse_attributes(cls, value: Any) -> Any:
        return _parse_json_map(value, "attributes")

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value: Any) -> Any:
        if _blank_to_none(value) is None:
            raise ValueError("Variant name cannot be empty.")
        return value

    def to_entity(self) -> VariantRecord:
        return VariantRecord(**self.model_dump())


class SupplierForm(BaseModel):
    """One child record of ``Product.suppliers``."""

    model_config = _FORM_CONFIG

    id: str | None = None
    supplier_id: str = Field("", validate_default=True)
    supplier_sku: str | None = None
    cost_price: float = Field(None, ge=0, validate_default=True)
    is_preferred: bool = False
    minimum_order_quantity: int | None = Field(None, gt=0)
    packaging_unit: str | None = None

    @field_validator(
        "id", "supplier_sku", "minimum_order_quantity", "packaging_unit",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("supplier_id", mode="before")
    @classmethod
    def _supplier_required(cls, value: Any) -> Any:
        if _blank_to_none(value) is None:
            raise ValueError("Supplier is required.")
        return value

    @field_validator("cost_price", mode="before")
    @classmethod
    def _cost_not_null(cls, value: Any) -> Any:
        if _blank_to_none(value) is None:
            raise ValueError("Cost price cannot be null.")
        return value

    def to_entity(self) -> SupplierLink:
        return SupplierLink(**self.model_dump())


class ProductForm(BaseModel):
    """Whole-aggregate form validated before every save."""

    model_config = _FORM_CONFIG

    id: str | None = None
    name: str = Field("", validate_default=True)
    description: str | None = None
    sku: str | None = Field(None, validate_default=True)
    barcode: str | None = None
    category_id: str = Field("", validate_default=True)
    buying_price: float = Field(None, gt=0, validate_default=True)
    retail_price: float | None = Field(None, ge=0)
    wholesale_price: float | None = Field(None, ge=0)
    is_active: bool = True
    image_urls: list[str] = Field(default_factory=list)
    custom_fields: dict[str, Any] | None = None
    width: float | None = Field(None, gt=0)
    height: float | None = Field(None, gt=0)
    length: float | None = Field(None, gt=0)
    dimension_unit: str = DEFAULT_DIMENSION_UNIT
    weight: float | None = Field(None, gt=0)
    weight_unit: str = DEFAULT_WEIGHT_UNIT
    volumetric_weight: float | None = Field(None, gt=0)
    default_location_id: str | None = None
    restock_unit: str | None = None
    items_per_unit: int | None = Field(None, gt=0)
    selling_unit: str | None = None
    variants: list[VariantForm] = Field(default_factory=list)
    suppliers: list[SupplierForm] = Field(default_factory=list)

    @field_validator(
        "id", "description", "barcode", "retail_price", "wholesale_price",
        "width", "height", "length", "weight", "volumetric_weight",
        "default_location_id", "restock_unit", "items_per_unit", "selling_unit",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("name", mode="before")
    @classmethod
    def _name_not_blank(cls, value: Any) -> Any:
        if _blank_to_none(value) is None:
            raise ValueError("Product name is required.")
        return value

    @field_validator("category_id", mode="before")
    @classmethod
    def _category_required(cls, value: Any) -> Any:
        if _blank_to_none(value) is None:
            raise ValueError("Category is required.")
        return value

    @field_validator("buying_price", mode="before")
    @classmethod
    def _buying_price_required(cls, value: Any) -> Any:
        if _blank_to_none(value) is None:
            raise ValueError("Buying price is required.")
        return value

    @field_validator("sku", mode="before")
    @classmethod
    def _sku_required_for_edit(cls, value: Any, info: ValidationInfo) -> Any:
        value = _blank_to_none(value)
        # new products get a generated SKU server-side
        if value is None and info.data.get("id"):
            raise ValueError("Product SKU is required for editing.")
        return value

    @field_validator("custom_fields", mode="before")
    @classmethod
    def _parse_custom_fields(cls, value: Any) -> Any:
        return _parse_json_map(value, "custom fields")

    @field_validator("image_urls", mode="before")
    @classmethod
    def _image_urls_as_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value

    @field_validator("image_urls")
    @classmethod
    def _image_urls_not_blank(cls, value: list[str]) -> list[str]:
        if any(not url for url in value):
            raise ValueError("Invalid image URL.")
        return value

    @classmethod
    def from_entity(cls, product: Product) -> "ProductForm":
        """Validate a live aggregate. Raises pydantic.ValidationError."""
        return cls.model_validate(asdict(product))

    def to_entity(self) -> Product:
        data = self.model_dump(exclude={"variants", "suppliers"})
        return Product(
            **data,
            variants=[v.to_entity() for v in self.variants],
            suppliers=[s.to_entity() for s in self.suppliers],
        )


CHILD_FORMS: dict[str, type[BaseModel]] = {
    "variants": VariantForm,
    "suppliers": SupplierForm,
}


def collect_field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a ValidationError into ``{"variants.0.name": "msg, msg"}``."""
    grouped: dict[str, list[str]] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "__root__"
        message = error["msg"].removeprefix("Value error, ")
        grouped.setdefault(path, []).append(message)
    return {path: ", ".join(messages) for path, messages in grouped.items()}


def server_field_path(api_field: str) -> str:
    """Map an API field name (``buyingPrice``, ``variants.0.buyingPrice``) to a form path."""
    return ".".join(to_snake(part) for part in api_field.split("."))
