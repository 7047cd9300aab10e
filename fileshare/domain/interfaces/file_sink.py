"""Interface for persisting uploaded files."""
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from fileshare.domain.entities.message import FileDescriptor


class FileSinkError(Exception):
    """Raised when an uploaded file cannot be written."""


class IFileSink(ABC):
    """Writes upload streams somewhere they can be fetched again by URL."""

    @abstractmethod
    def save(
        self,
        stream: BinaryIO,
        filename: str,
        mimetype: Optional[str] = None,
        encoding: Optional[str] = None,
    ) -> FileDescriptor:
        """
        Write an upload stream and describe where it landed.

        Args:
            stream: Readable byte stream of the upload
            filename: Original filename supplied by the client
            mimetype: Media type reported for the upload
            encoding: Transfer encoding reported for the upload

        Returns:
            Descriptor with the public URL of the stored file

        Raises:
            FileSinkError: If the file cannot be written
        """
        pass

    @abstractmethod
    def resolve(self, filename: str) -> Optional[str]:
        """
        Return the local path of a stored file, or None if it does not exist.

        Args:
            filename: Stored filename
        """
        pass
