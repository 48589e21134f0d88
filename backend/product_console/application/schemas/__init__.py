from .product import (
    CHILD_FORMS,
    ProductForm,
    SupplierForm,
    VariantForm,
    collect_field_errors,
    server_field_path,
)
from .product_session import EditorOpenRequest, SessionCreateRequest, SessionResponse

__all__ = [
    "CHILD_FORMS",
    "ProductForm",
    "SupplierForm",
    "VariantForm",
    "collect_field_errors",
    "server_field_path",
    "EditorOpenRequest",
    "SessionCreateRequest",
    "SessionResponse",
]
