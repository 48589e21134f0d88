from .attachment_storage import HttpAttachmentStorage
from .product_gateway import HttpProductGateway
from .reference_data_provider import HttpReferenceDataProvider

__all__ = [
    "HttpAttachmentStorage",
    "HttpProductGateway",
    "HttpReferenceDataProvider",
]
