from .attachment_upload_service import AttachmentUploadService
from .child_collection_editor import ChildCollectionEditor
from .listing_cache import ListingCache
from .notification_center import NotificationCenter
from .preview_registry import PreviewRegistry
from .edit_session_registry import EditSessionRegistry, ProductEditSessionFactory, SessionOptions
from .product_edit_session import ProductEditSession
from .reconciliation_service import ChildDeletionPolicy, ProductReconciler, ReconciliationResult
from .reference_data_service import ReferenceDataService
from .submission_service import ProductSubmissionService

__all__ = [
    "AttachmentUploadService",
    "ChildCollectionEditor",
    "ListingCache",
    "NotificationCenter",
    "PreviewRegistry",
    "EditSessionRegistry",
    "ProductEditSessionFactory",
    "SessionOptions",
    "ProductEditSession",
    "ChildDeletionPolicy",
    "ProductReconciler",
    "ReconciliationResult",
    "ReferenceDataService",
    "ProductSubmissionService",
]
