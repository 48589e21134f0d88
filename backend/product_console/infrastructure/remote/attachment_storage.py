"""Attachment storage backed by the remote ``/upload`` endpoint."""

import logging

import httpx

from product_console.application.interfaces import AttachmentStorage
from product_console.domain.entities import SelectedFile
from product_console.domain.exceptions import AttachmentUploadError
from product_console.infrastructure.remote._http import RemoteApiClient, error_message, read_json

logger = logging.getLogger(__name__)


class HttpAttachmentStorage(RemoteApiClient, AttachmentStorage):
    """Uploads one file per request as multipart field ``file``; the response carries ``{url}``."""

    upload_path = "/upload"

    async def upload(self, file: SelectedFile) -> str:
        files = {"file": (file.filename, file.content, file.content_type)}
        try:
            response = await self._request("POST", self.upload_path, files=files)
        except httpx.HTTPError as exc:
            logger.warning("Upload transport error for %s: %s", file.filename, exc)
            raise AttachmentUploadError(file.filename, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise AttachmentUploadError(
                file.filename,
                error_message(response, f"HTTP {response.status_code}"),
                status_code=response.status_code,
            )

        data = read_json(response)
        url = data.get("url") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            raise AttachmentUploadError(
                file.filename, "Response did not include a URL", status_code=response.status_code
            )
        logger.debug("Uploaded %s -> %s", file.filename, url)
        return url
