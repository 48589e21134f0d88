"""Attachment upload pipeline — uploads media files and merges their URLs into a product.

Each file is handled on its own: a failure for one file never rolls back
or blocks another. URLs are appended in completion order, which can differ
from selection order when ``concurrency`` is above 1.
"""

import asyncio
import logging
from collections.abc import Callable

from product_console.application.interfaces import AttachmentStorage
from product_console.application.services.notification_center import NotificationCenter
from product_console.application.services.preview_registry import PreviewRegistry
from product_console.domain.entities import (
    SelectedFile,
    UploadBatchResult,
    UploadStatus,
    UploadTask,
)
from product_console.domain.exceptions import AttachmentUploadError
from product_console.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ProductEditPipeline")

DEFAULT_ALLOWED_TYPES = ("image/",)
DEFAULT_MAX_SIZE_BYTES = 5 * 1024 * 1024


class AttachmentUploadService:
    """Owns the pending-upload list and preview handles of one edit session."""

    def __init__(
        self,
        storage: AttachmentStorage,
        notifications: NotificationCenter,
        *,
        concurrency: int = 1,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        allowed_types: tuple[str, ...] | list[str] = DEFAULT_ALLOWED_TYPES,
    ):
        self._storage = storage
        self._notifications = notifications
        self._concurrency = max(1, concurrency)
        self._max_size_bytes = max_size_bytes
        self._allowed_types = tuple(allowed_types)
        self._previews = PreviewRegistry()
        self._tasks: list[UploadTask] = []

    # ── Read state ──────────────────────────────────────────────────

    @property
    def pending(self) -> list[dict[str, str]]:
        """Loading placeholders for the rendering layer."""
        return [
            {
                "preview": task.preview.key,
                "filename": task.file.filename,
                "status": task.status.value,
            }
            for task in self._tasks
        ]

    @property
    def previews(self) -> PreviewRegistry:
        return self._previews

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_bytes

    @property
    def is_uploading(self) -> bool:
        return bool(self._tasks)

    # ── Actions ─────────────────────────────────────────────────────

    async def upload_files(self, files: list[SelectedFile], merge: Callable[[str], None]) -> UploadBatchResult:
        """Upload a batch and hand every successful URL to ``merge`` as it settles.

        Emits at most one success and one failure notification once the
        whole batch has settled.
        """
        result = UploadBatchResult()
        if not files:
            return result

        accepted: list[UploadTask] = []
        for file in files:
            reason = self._rejection_reason(file)
            if reason:
                plog.step_warning(PipelineStage.UPLOAD, f"Rejected {file.filename}", reason=reason)
                result.failed_files.append(file.filename)
                continue
            task = UploadTask(file=file, preview=self._previews.acquire(file))
            self._tasks.append(task)
            accepted.append(task)

        if accepted:
            plog.step_start(
                PipelineStage.UPLOAD,
                f"Uploading {len(accepted)} file(s)",
                concurrency=self._concurrency,
            )
            semaphore = asyncio.Semaphore(self._concurrency)

            async def _run(task: UploadTask) -> None:
                async with semaphore:
                    await self._upload_one(task, merge, result)

            await asyncio.gather(*(_run(task) for task in accepted))

        self._notify(result)
        plog.stats(uploaded=result.succeeded, failed=len(result.failed_files))
        return result

    @staticmethod
    def remove_media(media: list[str], url: str) -> bool:
        """Drop every exact match of ``url`` from ``media`` in place.

        Storage is not touched; the reference only disappears from the
        product once it is saved.
        """
        kept = [item for item in media if item != url]
        removed = len(kept) != len(media)
        media[:] = kept
        return removed

    def abandon(self) -> int:
        """Forget all in-flight uploads and release their previews now.

        Results that arrive later are discarded instead of merged.
        """
        count = len(self._tasks)
        self._tasks.clear()
        self._previews.release_all()
        if count:
            logger.info("Abandoned %d in-flight upload(s)", count)
        return count

    # ── Internals ───────────────────────────────────────────────────

    async def _upload_one(self, task: UploadTask, merge: Callable[[str], None], result: UploadBatchResult) -> None:
        filename = task.file.filename
        task.status = UploadStatus.UPLOADING
        url: str | None = None
        error: Exception | None = None
        try:
            url = await self._storage.upload(task.file)
        except AttachmentUploadError as exc:
            error = exc
        except Exception as exc:
            logger.exception("Unexpected error uploading %s", filename)
            error = exc
        finally:
            live = self._finish(task)

        if not live:
            logger.debug("Discarding result of abandoned upload %s", filename)
            return

        if error is not None:
            plog.step_warning(PipelineStage.UPLOAD, f"Upload failed for {filename}", error=str(error))
            result.failed_files.append(filename)
            return

        merge(url)
        result.uploaded_urls.append(url)
        plog.step_complete(PipelineStage.MERGE, f"Appended {url}", file=filename)

    def _finish(self, task: UploadTask) -> bool:
        """Remove the task and release its preview. False if it was abandoned."""
        self._previews.release(task.preview)
        try:
            self._tasks.remove(task)
        except ValueError:
            return False
        return True

    def _rejection_reason(self, file: SelectedFile) -> str | None:
        if self._allowed_types and not file.content_type.startswith(self._allowed_types):
            return f"unsupported type {file.content_type}"
        if file.size > self._max_size_bytes:
            return f"larger than {self._max_size_bytes // (1024 * 1024)} MB"
        return None

    def _notify(self, result: UploadBatchResult) -> None:
        if result.succeeded:
            self._notifications.success(
                f"{result.succeeded} image(s) uploaded successfully.",
                count=result.succeeded,
            )
        if result.failed_files:
            self._notifications.error(
                f"Failed to upload: {', '.join(result.failed_files)}",
                files=list(result.failed_files),
            )
