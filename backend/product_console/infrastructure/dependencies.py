"""FastAPI dependency injection — wires infrastructure to application layer."""

from fastapi import Depends

from product_console.config import get_settings
from product_console.application.interfaces import (
    AttachmentStorage,
    ProductGateway,
    ReferenceDataProvider,
)
from product_console.application.services import (
    ChildDeletionPolicy,
    EditSessionRegistry,
    ListingCache,
    ProductEditSessionFactory,
    SessionOptions,
)
from product_console.infrastructure.remote import (
    HttpAttachmentStorage,
    HttpProductGateway,
    HttpReferenceDataProvider,
)

# Process-wide state: live sessions and the shared lookup cache, built on first use
_session_registry: EditSessionRegistry | None = None
_listing_cache: ListingCache | None = None


def get_session_registry() -> EditSessionRegistry:
    global _session_registry
    if _session_registry is None:
        _session_registry = EditSessionRegistry(
            idle_timeout_seconds=get_settings().session_idle_timeout_seconds,
        )
    return _session_registry


def get_listing_cache() -> ListingCache:
    global _listing_cache
    if _listing_cache is None:
        _listing_cache = ListingCache(ttl_seconds=get_settings().reference_cache_ttl_seconds)
    return _listing_cache


def _remote_kwargs() -> dict:
    settings = get_settings()
    return {
        "base_url": settings.api_base_url,
        "api_token": settings.api_token,
        "timeout": settings.http_timeout_seconds,
    }


def get_product_gateway() -> ProductGateway:
    """Provides the products API adapter."""
    return HttpProductGateway(**_remote_kwargs())


def get_attachment_storage() -> AttachmentStorage:
    """Provides the upload endpoint adapter."""
    return HttpAttachmentStorage(**_remote_kwargs())


def get_reference_data_provider() -> ReferenceDataProvider:
    """Provides the categories/locations/suppliers adapter."""
    return HttpReferenceDataProvider(**_remote_kwargs())


def get_session_factory(
    gateway: ProductGateway = Depends(get_product_gateway),
    storage: AttachmentStorage = Depends(get_attachment_storage),
    reference_provider: ReferenceDataProvider = Depends(get_reference_data_provider),
    listing_cache: ListingCache = Depends(get_listing_cache),
) -> ProductEditSessionFactory:
    """Provides a session factory configured from Settings."""
    settings = get_settings()
    options = SessionOptions(
        upload_concurrency=settings.upload_concurrency,
        max_upload_size_bytes=settings.max_upload_size_mb * 1024 * 1024,
        allowed_upload_types=tuple(settings.allowed_upload_types),
        deletion_policy=ChildDeletionPolicy(settings.child_deletion_policy),
        products_list_path=settings.products_list_path,
    )
    return ProductEditSessionFactory(
        gateway=gateway,
        storage=storage,
        reference_provider=reference_provider,
        listing_cache=listing_cache,
        options=options,
    )
