"""Transient editing state: child editor sessions, uploads, notifications and saves."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .product import Product


# ── Child editor sessions ───────────────────────────────────────────

@dataclass(frozen=True)
class EditorClosed:
    """No child record is being edited."""


@dataclass
class EditorOpenNew:
    """Editing a child record that will be appended on commit."""

    draft: dict[str, Any]


@dataclass
class EditorOpenEdit:
    """Editing a value copy of the child record at ``index``."""

    index: int
    draft: dict[str, Any]


EditorState = EditorClosed | EditorOpenNew | EditorOpenEdit


# ── Uploads ─────────────────────────────────────────────────────────

@dataclass
class SelectedFile:
    """A file picked or dropped by the user, held in memory until uploaded."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PreviewHandle:
    """Opaque local preview reference, valid until released."""

    key: str
    filename: str


class UploadStatus(str, Enum):
    """Lifecycle of an upload task."""

    PENDING = "pending"
    UPLOADING = "uploading"


@dataclass
class UploadTask:
    """One in-flight upload; exists only until its request settles."""

    file: SelectedFile
    preview: PreviewHandle
    status: UploadStatus = UploadStatus.PENDING


@dataclass
class UploadBatchResult:
    """Outcome of one ``upload_files`` call."""

    uploaded_urls: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.uploaded_urls)


# ── Notifications ───────────────────────────────────────────────────

class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    """User-facing toast-style message emitted by the edit pipeline."""

    level: NotificationLevel
    message: str
    data: dict[str, Any] = field(default_factory=dict)


# ── Submission ──────────────────────────────────────────────────────

class SubmissionState(str, Enum):
    """States of the save pipeline."""

    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED_FIELDS = "failed_fields"
    FAILED_GENERAL = "failed_general"


@dataclass
class SubmissionOutcome:
    """Result of a save attempt, as reported to the surrounding screen."""

    state: SubmissionState
    persisted: Product | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    general_error: str | None = None
    navigate_to: str | None = None
