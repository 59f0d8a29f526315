from __future__ import annotations

from typing import Protocol, runtime_checkable

from backoffice.config import get_settings
from backoffice.exceptions import ValidationError


@runtime_checkable
class FileStorageService(Protocol):
    """Interface for the file storage collaborator."""

    async def resolve_location(self, location: str) -> str:
        """Turn an uploaded file's storage key into a stable URL."""
        ...


class PublicUrlFileStorage:
    """Resolves storage keys against a public base URL. Absolute URLs pass through."""

    def __init__(self, base_url: str | None = None) -> None:
        self._base_url = (base_url or get_settings().storage_public_base_url).rstrip("/")

    async def resolve_location(self, location: str) -> str:
        key = location.strip()
        if not key:
            raise ValidationError("Uploaded document location is empty")
        if key.startswith(("http://", "https://")):
            return key
        return f"{self._base_url}/{key.lstrip('/')}"


_file_storage: FileStorageService | None = None


def get_file_storage() -> FileStorageService:
    """Return the configured file storage collaborator."""
    global _file_storage
    if _file_storage is None:
        _file_storage = PublicUrlFileStorage()
    return _file_storage


def set_file_storage(storage: FileStorageService | None) -> None:
    """Override the collaborator (for testing or production wiring)."""
    global _file_storage
    _file_storage = storage
