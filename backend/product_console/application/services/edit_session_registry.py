"""In-process registry of live product edit sessions, plus the factory that opens them."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from product_console.application.interfaces import (
    AttachmentStorage,
    ProductGateway,
    ReferenceDataProvider,
)
from product_console.application.services.attachment_upload_service import (
    DEFAULT_ALLOWED_TYPES,
    DEFAULT_MAX_SIZE_BYTES,
    AttachmentUploadService,
)
from product_console.application.services.listing_cache import ListingCache
from product_console.application.services.notification_center import NotificationCenter
from product_console.application.services.product_edit_session import ProductEditSession
from product_console.application.services.reconciliation_service import (
    ChildDeletionPolicy,
    ProductReconciler,
)
from product_console.application.services.reference_data_service import ReferenceDataService
from product_console.application.services.submission_service import ProductSubmissionService
from product_console.domain.exceptions import EntityNotFoundError, ReferenceDataError

logger = logging.getLogger(__name__)


class EditSessionRegistry:
    """Holds sessions by id for the lifetime of the process.

    Sessions not read for ``idle_timeout_seconds`` are abandoned and dropped
    the next time a session is added, so clients that never send the
    closing DELETE do not pile up.
    """

    def __init__(
        self,
        idle_timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: dict[str, ProductEditSession] = {}
        self._last_touched: dict[str, float] = {}
        self._idle_timeout = idle_timeout_seconds
        self._clock = clock

    def add(self, session: ProductEditSession) -> ProductEditSession:
        self.sweep()
        self._sessions[session.id] = session
        self._last_touched[session.id] = self._clock()
        return session

    def get(self, session_id: str) -> ProductEditSession:
        try:
            session = self._sessions[session_id]
        except KeyError:
            raise EntityNotFoundError("ProductEditSession", session_id) from None
        self._last_touched[session_id] = self._clock()
        return session

    def close(self, session_id: str) -> ProductEditSession:
        """Abandon and forget a session."""
        session = self.get(session_id)
        session.abandon()
        self._forget(session_id)
        return session

    def close_all(self) -> int:
        count = len(self._sessions)
        for session in self._sessions.values():
            session.abandon()
        self._sessions.clear()
        self._last_touched.clear()
        return count

    def sweep(self) -> int:
        """Abandon and drop idle sessions. Returns how many were dropped."""
        if self._idle_timeout is None:
            return 0
        cutoff = self._clock() - self._idle_timeout
        expired = [sid for sid, touched in self._last_touched.items() if touched <= cutoff]
        for session_id in expired:
            self._sessions[session_id].abandon()
            self._forget(session_id)
        if expired:
            logger.info("Dropped %d idle edit session(s)", len(expired))
        return len(expired)

    def _forget(self, session_id: str) -> None:
        del self._sessions[session_id]
        self._last_touched.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


@dataclass
class SessionOptions:
    """Tunables applied to every new session."""

    upload_concurrency: int = 1
    max_upload_size_bytes: int = DEFAULT_MAX_SIZE_BYTES
    allowed_upload_types: tuple[str, ...] = field(default=DEFAULT_ALLOWED_TYPES)
    deletion_policy: ChildDeletionPolicy = ChildDeletionPolicy.FULL_REPLACE
    products_list_path: str = "/products"


class ProductEditSessionFactory:
    """Builds a fully wired session for "create" or "edit <product id>"."""

    def __init__(
        self,
        gateway: ProductGateway,
        storage: AttachmentStorage,
        reference_provider: ReferenceDataProvider,
        listing_cache: ListingCache,
        options: SessionOptions | None = None,
    ):
        self._gateway = gateway
        self._storage = storage
        self._reference_provider = reference_provider
        self._listing_cache = listing_cache
        self._options = options or SessionOptions()

    async def start(self, product_id: str | None = None) -> ProductEditSession:
        """Open a session.

        Raises:
            EntityNotFoundError: ``product_id`` does not exist.
            ReferenceDataError: lookups failed, so the form cannot be used.
        """
        product = None
        if product_id:
            product = await self._gateway.get(product_id)
            if product is None:
                raise EntityNotFoundError("Product", product_id)

        notifications = NotificationCenter()
        opts = self._options
        session = ProductEditSession(
            upload_service=AttachmentUploadService(
                self._storage,
                notifications,
                concurrency=opts.upload_concurrency,
                max_size_bytes=opts.max_upload_size_bytes,
                allowed_types=opts.allowed_upload_types,
            ),
            submission_service=ProductSubmissionService(
                self._gateway,
                ProductReconciler(opts.deletion_policy),
                notifications,
                listing_cache=self._listing_cache,
                products_list_path=opts.products_list_path,
            ),
            notifications=notifications,
            reference_service=ReferenceDataService(self._reference_provider, self._listing_cache),
        )
        session.initialize(product)

        reference = await session.load_reference_data()
        if reference.is_blocking:
            raise ReferenceDataError("reference data", reference.error or "unavailable")
        return session
