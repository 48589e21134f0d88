from .product import (
    Product,
    VariantRecord,
    SupplierLink,
    VARIANTS,
    SUPPLIERS,
    CHILD_COLLECTIONS,
)
from .editing import (
    EditorState,
    EditorClosed,
    EditorOpenNew,
    EditorOpenEdit,
    SelectedFile,
    PreviewHandle,
    UploadStatus,
    UploadTask,
    UploadBatchResult,
    Notification,
    NotificationLevel,
    SubmissionState,
    SubmissionOutcome,
)
from .reference_data import ReferenceItem, ReferenceData, LoadStatus

__all__ = [
    "Product",
    "VariantRecord",
    "SupplierLink",
    "VARIANTS",
    "SUPPLIERS",
    "CHILD_COLLECTIONS",
    "EditorState",
    "EditorClosed",
    "EditorOpenNew",
    "EditorOpenEdit",
    "SelectedFile",
    "PreviewHandle",
    "UploadStatus",
    "UploadTask",
    "UploadBatchResult",
    "Notification",
    "NotificationLevel",
    "SubmissionState",
    "SubmissionOutcome",
    "ReferenceItem",
    "ReferenceData",
    "LoadStatus",
]
