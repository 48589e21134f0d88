"""Abstract attachment storage interface — port for media upload adapters."""

from abc import ABC, abstractmethod

from product_console.domain.entities import SelectedFile


class AttachmentStorage(ABC):
    """Port — stores one binary file and returns a reference URL."""

    @abstractmethod
    async def upload(self, file: SelectedFile) -> str:
        """Upload a single file.

        Args:
            file: The raw file selected by the user.

        Returns:
            The reference URL of the stored file.

        Raises:
            AttachmentUploadError: on transport failure, a non-success
                status, or a success response without a URL.
        """
        ...
