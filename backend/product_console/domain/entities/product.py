"""Domain entities for the product aggregate (root product plus owned child collections)."""

import copy
from dataclasses import dataclass, field, fields
from typing import Any

DEFAULT_WEIGHT_UNIT = "WEIGHT_KG"
DEFAULT_DIMENSION_UNIT = "CENTIMETER"

VARIANTS = "variants"
SUPPLIERS = "suppliers"
CHILD_COLLECTIONS = (VARIANTS, SUPPLIERS)


@dataclass
class VariantRecord:
    """One sellable variation of a product (size, color, ...).

    ``id`` is None until the record has been created server-side. Price and
    quantity fields hold whatever the user entered until the aggregate is
    validated, so they may temporarily be strings.
    """

    name: Any = ""
    id: str | None = None
    sku: str | None = None
    barcode: str | None = None
    buying_price: Any = 0
    retail_price: Any = None
    wholesale_price: Any = None
    stock_quantity: Any = 0
    reorder_point: Any = 5
    reorder_qty: Any = 10
    is_active: bool = True
    low_stock_alert: bool = False
    attributes: dict[str, Any] | None = None
    weight: Any = None
    weight_unit: str = DEFAULT_WEIGHT_UNIT


@dataclass
class SupplierLink:
    """Link between a product and one of its suppliers."""

    supplier_id: str = ""
    id: str | None = None
    supplier_sku: str | None = None
    cost_price: Any = None
    is_preferred: bool = False
    minimum_order_quantity: Any = None
    packaging_unit: str | None = None


@dataclass
class Product:
    """Root of the product aggregate.

    ``image_urls`` is ordered; the first entry is the primary display image.
    """

    name: Any = ""
    id: str | None = None
    description: str | None = None
    sku: str | None = None
    barcode: str | None = None
    category_id: str = ""
    buying_price: Any = 0
    retail_price: Any = None
    wholesale_price: Any = None
    is_active: bool = True
    image_urls: list[str] = field(default_factory=list)
    custom_fields: dict[str, Any] | None = None
    width: Any = None
    height: Any = None
    length: Any = None
    dimension_unit: str = DEFAULT_DIMENSION_UNIT
    weight: Any = None
    weight_unit: str = DEFAULT_WEIGHT_UNIT
    volumetric_weight: Any = None
    default_location_id: str | None = None
    restock_unit: str | None = None
    items_per_unit: Any = None
    selling_unit: str | None = None
    variants: list[VariantRecord] = field(default_factory=list)
    suppliers: list[SupplierLink] = field(default_factory=list)

    @classmethod
    def scalar_field_names(cls) -> list[str]:
        """Names of the 1:1 fields (everything except the child collections)."""
        return [f.name for f in fields(cls) if f.name not in CHILD_COLLECTIONS]

    def children(self, collection: str) -> list:
        """Return the live child list for ``variants`` or ``suppliers``."""
        if collection not in CHILD_COLLECTIONS:
            raise ValueError(f"Unknown child collection: {collection}")
        return getattr(self, collection)

    def clone(self) -> "Product":
        """Deep copy; the clone shares no mutable state with this aggregate."""
        return copy.deepcopy(self)
