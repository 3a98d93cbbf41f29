"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod
from typing import BinaryIO


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image files.

    Implementations could be local disk, S3, an in-memory tree, etc.
    Locations are backend-specific strings built with ``join``; callers
    never parse them.
    """

    @abstractmethod
    def join(self, *parts: str) -> str:
        """Build a location from path segments."""

    @abstractmethod
    def make_dirs(self, location: str) -> None:
        """Create ``location`` and any missing parents. Idempotent.

        Raises:
            OSError: If the directory cannot be created
        """

    @abstractmethod
    def list_dir(self, location: str) -> list[str]:
        """Return the entry names directly under ``location``.

        A missing directory yields an empty list.
        """

    @abstractmethod
    def exists(self, location: str) -> bool:
        """Return True if a file exists at ``location``."""

    @abstractmethod
    def write_stream(self, location: str, stream: BinaryIO) -> int:
        """Copy ``stream`` to ``location``, replacing any existing file.

        Returns:
            Number of bytes written

        Raises:
            OSError: If the file cannot be created or written
        """

    @abstractmethod
    def read_bytes(self, location: str) -> bytes:
        """Return the content stored at ``location``.

        Raises:
            FileNotFoundError: If nothing is stored there
            OSError: If the read fails
        """

    @abstractmethod
    def remove(self, location: str) -> None:
        """Delete the file at ``location``.

        Raises:
            FileNotFoundError: If nothing is stored there
            OSError: If removal fails
        """
