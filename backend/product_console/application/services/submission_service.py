"""Submission state machine for product saves.

States: IDLE -> VALIDATING -> SUBMITTING -> SUCCESS | FAILED_FIELDS | FAILED_GENERAL.
A save requested while SUBMITTING is ignored, which keeps a double click
from creating the same product twice.
"""

import logging

from pydantic import ValidationError

from product_console.application.interfaces import ProductGateway
from product_console.application.schemas.product import (
    ProductForm,
    collect_field_errors,
    server_field_path,
)
from product_console.application.services.listing_cache import ListingCache
from product_console.application.services.notification_center import NotificationCenter
from product_console.application.services.reconciliation_service import (
    ProductReconciler,
    ReconciliationResult,
)
from product_console.domain.entities import Product, SubmissionOutcome, SubmissionState
from product_console.domain.exceptions import PersistenceError, PersistenceFieldError
from product_console.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ProductEditPipeline")

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class ProductSubmissionService:
    """Runs one save at a time for a single edit session."""

    def __init__(
        self,
        gateway: ProductGateway,
        reconciler: ProductReconciler,
        notifications: NotificationCenter,
        *,
        listing_cache: ListingCache | None = None,
        products_list_path: str = "/products",
    ):
        self._gateway = gateway
        self._reconciler = reconciler
        self._notifications = notifications
        self._listing_cache = listing_cache
        self._products_list_path = products_list_path
        self._state = SubmissionState.IDLE

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state in (SubmissionState.VALIDATING, SubmissionState.SUBMITTING)

    async def submit(self, original: Product | None, edited: Product) -> SubmissionOutcome | None:
        """Save ``edited``. Returns None when a save is already in flight."""
        if self.is_busy:
            logger.info("Save ignored: a submission is already in progress")
            return None

        # ── Validating ──
        self._state = SubmissionState.VALIDATING
        try:
            form = ProductForm.from_entity(edited)
        except ValidationError as exc:
            field_errors = collect_field_errors(exc)
            self._state = SubmissionState.IDLE
            plog.step_warning(PipelineStage.VALIDATE, "Local validation failed", fields=len(field_errors))
            return SubmissionOutcome(state=SubmissionState.IDLE, field_errors=field_errors)

        result = self._reconciler.reconcile(original, form.to_entity())
        plog.step_complete(
            PipelineStage.RECONCILE,
            "Payload ready",
            variants=len(result.payload["variants"]),
            suppliers=len(result.payload["suppliers"]),
            deletes=len(result.pending_deletes),
        )

        # ── Submitting ──
        self._state = SubmissionState.SUBMITTING
        try:
            outcome = await self._send(edited.id, result)
        finally:
            if self._state is SubmissionState.SUBMITTING:
                self._state = SubmissionState.IDLE
        self._state = outcome.state
        return outcome

    async def _send(self, product_id: str | None, result: ReconciliationResult) -> SubmissionOutcome:
        action = "Updating" if product_id else "Creating"
        try:
            with plog.timed_step(PipelineStage.SUBMIT, f"{action} product", id=product_id or "<new>"):
                if product_id:
                    persisted = await self._gateway.update(product_id, result.payload)
                    # only after the update landed, so a failed save deletes nothing
                    for collection, child_id in result.pending_deletes:
                        await self._gateway.delete_child(collection, product_id, child_id)
                    _drop_deleted_children(persisted, result.pending_deletes)
                else:
                    persisted = await self._gateway.create(result.payload)
        except PersistenceFieldError as exc:
            field_errors = {
                server_field_path(name): ", ".join(messages) if isinstance(messages, list) else str(messages)
                for name, messages in exc.field_errors.items()
            }
            self._notifications.error(exc.message)
            return SubmissionOutcome(state=SubmissionState.FAILED_FIELDS, field_errors=field_errors)
        except PersistenceError as exc:
            self._notifications.error(exc.message)
            return SubmissionOutcome(state=SubmissionState.FAILED_GENERAL, general_error=exc.message)
        except Exception:
            logger.exception("Unexpected error while saving product %s", product_id or "<new>")
            self._notifications.error(UNEXPECTED_ERROR_MESSAGE)
            return SubmissionOutcome(
                state=SubmissionState.FAILED_GENERAL,
                general_error=UNEXPECTED_ERROR_MESSAGE,
            )

        if self._listing_cache is not None:
            self._listing_cache.invalidate("products")
        verb = "updated" if product_id else "created"
        self._notifications.success(f"Product {verb} successfully!", product_id=persisted.id)
        plog.step_complete(PipelineStage.COMPLETE, f"Product {verb}", id=persisted.id)
        return SubmissionOutcome(
            state=SubmissionState.SUCCESS,
            persisted=persisted,
            navigate_to=self._products_list_path,
        )


def _drop_deleted_children(product: Product, deletes: list[tuple[str, str]]) -> None:
    for collection, child_id in deletes:
        children = product.children(collection)
        children[:] = [child for child in children if child.id != child_id]
