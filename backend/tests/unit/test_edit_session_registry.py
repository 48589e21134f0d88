"""Unit tests for the EditSessionRegistry."""

import pytest

from product_console.application.interfaces import AttachmentStorage, ProductGateway
from product_console.application.services import (
    AttachmentUploadService,
    EditSessionRegistry,
    NotificationCenter,
    ProductEditSession,
    ProductReconciler,
    ProductSubmissionService,
)
from product_console.domain.exceptions import EntityNotFoundError


class NullStorage(AttachmentStorage):
    async def upload(self, file):
        raise NotImplementedError


class NullGateway(ProductGateway):
    async def get(self, product_id):
        return None

    async def create(self, payload):
        raise NotImplementedError

    async def update(self, product_id, payload):
        raise NotImplementedError

    async def delete_child(self, collection, product_id, child_id):
        raise NotImplementedError


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _session() -> ProductEditSession:
    notifications = NotificationCenter()
    session = ProductEditSession(
        upload_service=AttachmentUploadService(NullStorage(), notifications),
        submission_service=ProductSubmissionService(NullGateway(), ProductReconciler(), notifications),
        notifications=notifications,
    )
    session.initialize(None)
    return session


def test_idle_sessions_are_dropped_when_a_new_one_is_added():
    clock = FakeClock()
    registry = EditSessionRegistry(idle_timeout_seconds=600, clock=clock)
    stale = registry.add(_session())
    active = registry.add(_session())

    clock.now = 500
    registry.get(active.id)
    clock.now = 700
    fresh = registry.add(_session())

    assert stale.id not in registry
    assert active.id in registry
    assert fresh.id in registry
    assert len(registry) == 2
    with pytest.raises(EntityNotFoundError):
        registry.get(stale.id)


def test_sweep_reports_dropped_sessions():
    clock = FakeClock()
    registry = EditSessionRegistry(idle_timeout_seconds=60, clock=clock)
    registry.add(_session())
    registry.add(_session())

    clock.now = 61

    assert registry.sweep() == 2
    assert len(registry) == 0


def test_without_timeout_sessions_stay_until_closed():
    clock = FakeClock()
    registry = EditSessionRegistry(clock=clock)
    session = registry.add(_session())

    clock.now = 10_000
    registry.add(_session())

    assert session.id in registry
    registry.close(session.id)
    assert session.id not in registry
