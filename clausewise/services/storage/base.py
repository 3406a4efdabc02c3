from abc import ABC, abstractmethod


class FileStorage(ABC):
    """Object storage for uploaded contract files, addressed by path."""

    @abstractmethod
    async def save(self, path: str, content: bytes, content_type: str) -> None:
        """Store content at path, replacing anything already there."""
        ...

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """Return the content stored at path. Raises FileNotFoundError if absent."""
        ...

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """Delete the object at path.

        Returns True if an object was removed and False if nothing was there.
        Deleting a missing path is not an error, so concurrent or repeated
        deletes of the same path are safe.
        """
        ...
