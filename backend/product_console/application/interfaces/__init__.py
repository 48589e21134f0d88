from .attachment_storage import AttachmentStorage
from .product_gateway import ProductGateway
from .reference_data_provider import ReferenceDataProvider

__all__ = [
    "AttachmentStorage",
    "ProductGateway",
    "ReferenceDataProvider",
]
