"""Unit tests for the AttachmentUploadService."""

import asyncio

import pytest

from product_console.application.interfaces import AttachmentStorage
from product_console.application.services import AttachmentUploadService, NotificationCenter
from product_console.domain.entities import NotificationLevel, SelectedFile
from product_console.domain.exceptions import AttachmentUploadError


def _png(name: str, size: int = 16) -> SelectedFile:
    return SelectedFile(filename=name, content=b"x" * size, content_type="image/png")


class FakeAttachmentStorage(AttachmentStorage):
    """Returns ``/<filename>`` unless the file is listed in ``failures``."""

    def __init__(self, failures: dict[str, Exception] | None = None):
        self.failures = failures or {}
        self.uploaded: list[str] = []

    async def upload(self, file: SelectedFile) -> str:
        await asyncio.sleep(0)
        if file.filename in self.failures:
            raise self.failures[file.filename]
        self.uploaded.append(file.filename)
        return f"/{file.filename}"


class GatedStorage(AttachmentStorage):
    """Holds each upload until its own gate is opened."""

    def __init__(self, names: list[str]):
        self.gates = {name: asyncio.Event() for name in names}
        self.started = {name: asyncio.Event() for name in names}

    async def upload(self, file: SelectedFile) -> str:
        self.started[file.filename].set()
        await self.gates[file.filename].wait()
        return f"/{file.filename}"


class BlockingStorage(AttachmentStorage):
    """Holds every upload until ``release`` is set."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def upload(self, file: SelectedFile) -> str:
        self.started.set()
        await self.release.wait()
        return f"/{file.filename}"


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.mark.asyncio
async def test_partial_failure_reports_one_success_and_one_failure(notifications: NotificationCenter):
    storage = FakeAttachmentStorage({"b.png": AttachmentUploadError("b.png", "HTTP 500", 500)})
    service = AttachmentUploadService(storage, notifications)
    media: list[str] = []

    result = await service.upload_files([_png("a.png"), _png("b.png")], media.append)

    assert media == ["/a.png"]
    assert result.uploaded_urls == ["/a.png"]
    assert result.failed_files == ["b.png"]

    drained = notifications.drain()
    assert [n.level for n in drained] == [NotificationLevel.SUCCESS, NotificationLevel.ERROR]
    assert drained[0].data == {"count": 1}
    assert drained[0].message == "1 image(s) uploaded successfully."
    assert "b.png" in drained[1].message
    assert drained[1].data == {"files": ["b.png"]}


@pytest.mark.asyncio
async def test_failed_upload_does_not_block_other_file_concurrently(notifications: NotificationCenter):
    storage = FakeAttachmentStorage({"x.png": RuntimeError("socket closed")})
    service = AttachmentUploadService(storage, notifications, concurrency=2)
    media = ["/existing.png"]

    await service.upload_files([_png("x.png"), _png("y.png")], media.append)

    assert media == ["/existing.png", "/y.png"]


@pytest.mark.asyncio
async def test_previews_released_after_batch(notifications: NotificationCenter):
    storage = FakeAttachmentStorage({"b.png": AttachmentUploadError("b.png", "boom")})
    service = AttachmentUploadService(storage, notifications)

    await service.upload_files([_png("a.png"), _png("b.png")], [].append)

    assert len(service.previews) == 0
    assert not service.is_uploading
    assert service.pending == []


@pytest.mark.asyncio
async def test_non_images_and_oversized_files_rejected_before_upload(notifications: NotificationCenter):
    storage = FakeAttachmentStorage()
    service = AttachmentUploadService(storage, notifications, max_size_bytes=10)
    text = SelectedFile(filename="notes.txt", content=b"hello", content_type="text/plain")
    media: list[str] = []

    result = await service.upload_files([text, _png("big.png", size=11), _png("ok.png", size=10)], media.append)

    assert storage.uploaded == ["ok.png"]
    assert media == ["/ok.png"]
    assert result.failed_files == ["notes.txt", "big.png"]


@pytest.mark.asyncio
async def test_empty_batch_emits_nothing(notifications: NotificationCenter):
    service = AttachmentUploadService(FakeAttachmentStorage(), notifications)

    result = await service.upload_files([], [].append)

    assert result.succeeded == 0
    assert notifications.pending == []


@pytest.mark.asyncio
async def test_all_success_emits_single_notification(notifications: NotificationCenter):
    service = AttachmentUploadService(FakeAttachmentStorage(), notifications, concurrency=3)
    media: list[str] = []

    await service.upload_files([_png("a.png"), _png("b.png"), _png("c.png")], media.append)

    assert sorted(media) == ["/a.png", "/b.png", "/c.png"]
    drained = notifications.drain()
    assert len(drained) == 1
    assert drained[0].data == {"count": 3}


@pytest.mark.asyncio
async def test_urls_are_merged_in_completion_order(notifications: NotificationCenter):
    storage = GatedStorage(["a.png", "b.png"])
    service = AttachmentUploadService(storage, notifications, concurrency=2)
    media: list[str] = []

    batch = asyncio.create_task(service.upload_files([_png("a.png"), _png("b.png")], media.append))
    await storage.started["a.png"].wait()
    await storage.started["b.png"].wait()

    storage.gates["b.png"].set()
    while media != ["/b.png"]:
        await asyncio.sleep(0)
    storage.gates["a.png"].set()
    result = await batch

    assert media == ["/b.png", "/a.png"]
    assert result.uploaded_urls == ["/b.png", "/a.png"]


@pytest.mark.asyncio
async def test_abandon_releases_previews_and_discards_late_results(notifications: NotificationCenter):
    storage = BlockingStorage()
    service = AttachmentUploadService(storage, notifications)
    media: list[str] = []

    batch = asyncio.create_task(service.upload_files([_png("a.png")], media.append))
    await storage.started.wait()

    assert service.is_uploading
    assert service.pending[0]["filename"] == "a.png"
    assert service.pending[0]["status"] == "uploading"

    assert service.abandon() == 1
    assert len(service.previews) == 0

    storage.release.set()
    result = await batch

    assert media == []
    assert result.uploaded_urls == []


def test_remove_media_drops_every_match():
    media = ["/a.png", "/b.png", "/a.png"]

    assert AttachmentUploadService.remove_media(media, "/a.png") is True
    assert media == ["/b.png"]
    assert AttachmentUploadService.remove_media(media, "/zzz.png") is False
    assert media == ["/b.png"]
