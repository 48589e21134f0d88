"""Preview registry — owns the local preview handles of in-flight uploads."""

import itertools
import logging

from product_console.domain.entities import PreviewHandle, SelectedFile

logger = logging.getLogger(__name__)


class PreviewRegistry:
    """Arena of preview handles.

    Every handle handed out by ``acquire`` stays live until ``release`` or
    ``release_all``; the registry is the only owner, so a leak shows up as a
    non-empty ``active`` list.
    """

    def __init__(self) -> None:
        self._handles: dict[str, PreviewHandle] = {}
        self._sequence = itertools.count(1)

    def acquire(self, file: SelectedFile) -> PreviewHandle:
        handle = PreviewHandle(key=f"preview-{next(self._sequence)}", filename=file.filename)
        self._handles[handle.key] = handle
        return handle

    def release(self, handle: PreviewHandle) -> bool:
        """Release one handle. Returns False if it was already released."""
        return self._handles.pop(handle.key, None) is not None

    def release_all(self) -> int:
        """Release every live handle and return how many there were."""
        count = len(self._handles)
        self._handles.clear()
        if count:
            logger.debug("Released %d outstanding preview handle(s)", count)
        return count

    @property
    def active(self) -> list[PreviewHandle]:
        return list(self._handles.values())

    def __len__(self) -> int:
        return len(self._handles)
