"""Product edit session: the single owner of one product aggregate while it is edited.

Every mutation (field edits, child editor commits, upload merges, saves)
goes through this object and runs on the event loop thread, so they are
applied one after another and never interleave.
"""

import logging
from dataclasses import asdict
from typing import Any
from uuid import uuid4

from product_console.application.services.attachment_upload_service import AttachmentUploadService
from product_console.application.services.child_collection_editor import ChildCollectionEditor
from product_console.application.services.notification_center import NotificationCenter
from product_console.application.services.reference_data_service import ReferenceDataService
from product_console.application.services.submission_service import ProductSubmissionService
from product_console.domain.entities import (
    CHILD_COLLECTIONS,
    LoadStatus,
    VARIANTS,
    Product,
    ReferenceData,
    SelectedFile,
    SubmissionOutcome,
    SubmissionState,
    SupplierLink,
    UploadBatchResult,
    VariantRecord,
)
from product_console.domain.exceptions import ReferenceDataError
from product_console.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ProductEditPipeline")

# Fields that have their own editing surface
_NOT_DIRECTLY_EDITABLE = frozenset({"id", "image_urls", *CHILD_COLLECTIONS})


class ProductEditSession:
    """Create-or-edit session for one product.

    Mode is decided by ``initialize``: with a product it edits that product
    (saves become updates), without one it starts from defaults (saves
    become creates).
    """

    def __init__(
        self,
        *,
        upload_service: AttachmentUploadService,
        submission_service: ProductSubmissionService,
        notifications: NotificationCenter,
        reference_service: ReferenceDataService | None = None,
        session_id: str | None = None,
    ):
        self.id = session_id or str(uuid4())
        self._uploads = upload_service
        self._submission = submission_service
        self._notifications = notifications
        self._reference_service = reference_service
        self._editors = {c: ChildCollectionEditor(c) for c in CHILD_COLLECTIONS}

        self._original: Product | None = None
        self._edited = Product()
        self._reference = ReferenceData()
        self._field_errors: dict[str, str] = {}
        self._general_error: str | None = None
        self._last_outcome: SubmissionOutcome | None = None

    # ── Read state ──────────────────────────────────────────────────

    @property
    def mode(self) -> str:
        return "edit" if self._original is not None and self._original.id else "create"

    @property
    def product(self) -> Product:
        """The live edited aggregate."""
        return self._edited

    @property
    def original(self) -> Product | None:
        return self._original

    @property
    def reference(self) -> ReferenceData:
        return self._reference

    @property
    def field_errors(self) -> dict[str, str]:
        return dict(self._field_errors)

    @property
    def general_error(self) -> str | None:
        return self._general_error

    @property
    def submission_state(self) -> SubmissionState:
        return self._submission.state

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications

    def editor(self, collection: str = VARIANTS) -> ChildCollectionEditor:
        try:
            return self._editors[collection]
        except KeyError:
            raise ValueError(f"Unknown child collection: {collection}") from None

    # ── Lifecycle ───────────────────────────────────────────────────

    def initialize(self, product: Product | None = None) -> None:
        """Start editing ``product`` (edit mode) or a blank product (create mode)."""
        self._uploads.abandon()
        for editor in self._editors.values():
            editor.discard()
        self._original = product.clone() if product is not None else None
        self._edited = product.clone() if product is not None else Product()
        self._field_errors = {}
        self._general_error = None
        self._last_outcome = None
        logger.info("Edit session %s initialized in %s mode", self.id, self.mode)

    async def load_reference_data(self) -> ReferenceData:
        """Load categories, locations and suppliers; an error blocks the session."""
        if self._reference_service is None:
            self._reference = ReferenceData(status=LoadStatus.READY)
        else:
            self._reference = await self._reference_service.load()
        return self._reference

    def abandon(self) -> None:
        """Navigation away: drop pending uploads and open editors without saving."""
        released = self._uploads.abandon()
        for editor in self._editors.values():
            editor.discard()
        logger.info("Edit session %s abandoned (%d upload(s) dropped)", self.id, released)

    # ── 1:1 fields ──────────────────────────────────────────────────

    def update_fields(self, **values: Any) -> None:
        """Set scalar fields. Clears any error previously shown on those fields."""
        self._ensure_usable()
        allowed = set(Product.scalar_field_names()) - _NOT_DIRECTLY_EDITABLE
        unknown = [key for key in values if key not in allowed]
        if unknown:
            raise ValueError(f"Fields cannot be edited directly: {', '.join(sorted(unknown))}")
        for key, value in values.items():
            setattr(self._edited, key, value)
            self._field_errors.pop(key, None)

    # ── Child collections ───────────────────────────────────────────

    def open_child_editor(self, index: int | None = None, collection: str = VARIANTS) -> dict[str, Any]:
        self._ensure_usable()
        editor = self.editor(collection)
        editor.open(self._edited, index)
        return editor.describe()

    def update_child_draft(self, values: dict[str, Any], collection: str = VARIANTS) -> dict[str, Any]:
        editor = self.editor(collection)
        editor.update_draft(**values)
        return editor.describe()

    def commit_child(
        self, values: dict[str, Any] | None = None, collection: str = VARIANTS
    ) -> VariantRecord | SupplierLink | None:
        """Commit the open child editor. None means validation kept it open."""
        self._ensure_usable()
        editor = self.editor(collection)
        mode = editor.describe()["mode"]
        record = editor.commit(self._edited, values)
        if record is not None:
            noun = "Variant" if collection == VARIANTS else "Supplier"
            verb = "updated" if mode == "edit" else "added"
            self._notifications.success(f"{noun} {verb} successfully.")
            plog.step_complete(
                PipelineStage.EDITOR,
                f"{noun} {verb}",
                total=len(self._edited.children(collection)),
            )
        return record

    def discard_child(self, collection: str = VARIANTS) -> None:
        self.editor(collection).discard()

    def remove_child(self, index: int, collection: str = VARIANTS) -> VariantRecord | SupplierLink:
        self._ensure_usable()
        removed = self.editor(collection).remove(self._edited, index)
        plog.step_complete(PipelineStage.EDITOR, f"Removed {collection}[{index}]", id=removed.id or "<unsaved>")
        self._notifications.info("Removed. Save the product to confirm changes.")
        return removed

    # ── Media ───────────────────────────────────────────────────────

    @property
    def max_upload_size_bytes(self) -> int:
        return self._uploads.max_size_bytes

    async def upload_files(self, files: list[SelectedFile]) -> UploadBatchResult:
        self._ensure_usable()
        return await self._uploads.upload_files(files, self._merge_media)

    def remove_media(self, url: str) -> bool:
        removed = self._uploads.remove_media(self._edited.image_urls, url)
        if removed:
            self._notifications.info("Image marked for removal. Save changes to confirm.")
        return removed

    # ── Save ────────────────────────────────────────────────────────

    async def save(self) -> SubmissionOutcome | None:
        """Validate and submit. Returns None if a save is already running."""
        self._ensure_usable()
        if self._submission.is_busy:
            return None

        self._field_errors = {}
        self._general_error = None
        submitted_media = list(self._edited.image_urls)
        outcome = await self._submission.submit(self._original, self._edited)
        if outcome is None:
            return None

        self._field_errors = dict(outcome.field_errors)
        self._general_error = outcome.general_error
        self._last_outcome = outcome
        if outcome.state is SubmissionState.SUCCESS and outcome.persisted is not None:
            # later saves update the record that now exists
            late_media = [url for url in self._edited.image_urls if url not in submitted_media]
            self._original = outcome.persisted.clone()
            self._edited = outcome.persisted.clone()
            for url in late_media:
                if url not in self._edited.image_urls:
                    self._merge_media(url)
        return outcome

    # ── View ────────────────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """Serializable view of the whole session for the rendering layer."""
        return {
            "id": self.id,
            "mode": self.mode,
            "product": asdict(self._edited),
            "submission_state": self._submission.state.value,
            "field_errors": self.field_errors,
            "general_error": self._general_error,
            "navigate_to": self._last_outcome.navigate_to if self._last_outcome else None,
            "pending_uploads": self._uploads.pending,
            "editors": {c: e.describe() for c, e in self._editors.items()},
            "reference": {
                "status": self._reference.status.value,
                "error": self._reference.error,
                "categories": [asdict(i) for i in self._reference.categories],
                "locations": [asdict(i) for i in self._reference.locations],
                "suppliers": [asdict(i) for i in self._reference.suppliers],
            },
            "notifications": [
                {"level": n.level.value, "message": n.message, "data": n.data}
                for n in self._notifications.drain()
            ],
        }

    def _merge_media(self, url: str) -> None:
        # always the current aggregate, which a save may have replaced
        self._edited.image_urls.append(url)

    def _ensure_usable(self) -> None:
        if self._reference.is_blocking:
            raise ReferenceDataError("reference data", self._reference.error or "unavailable")
