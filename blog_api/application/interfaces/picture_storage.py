"""Abstract interface (port) for cover picture storage."""

from abc import ABC, abstractmethod
from pathlib import Path


class PictureStorage(ABC):
    """Port for storing uploaded cover pictures — implemented in the infrastructure layer."""

    @abstractmethod
    async def store(self, content: bytes, original_filename: str, content_type: str | None = None) -> str:
        """Store the bytes under a generated unique name and return that name.

        Raises ``StorageError`` when the file cannot be written.
        """
        ...

    @abstractmethod
    async def delete(self, filename: str) -> bool:
        """Best-effort removal. Returns True if a file was removed; never raises."""
        ...

    @abstractmethod
    def path_for(self, filename: str) -> Path:
        """Return the on-disk location of a stored picture."""
        ...
