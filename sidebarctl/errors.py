# Sidebarctl Errors
# Exception hierarchy for shared file list editing


class SidebarError(Exception):
    """Base exception for sidebar store errors."""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(message)


class NotFoundError(SidebarError):
    """Store file does not exist."""


class AccessError(SidebarError):
    """Store file exists but cannot be read or written (usually Full Disk Access)."""


class DecodeError(SidebarError):
    """Archive data is malformed or references a class outside the allow-list."""


class BookmarkError(SidebarError):
    """Bookmark blob cannot be parsed or created."""


class DuplicateError(SidebarError):
    """Item with the same resolved path is already present."""


class StructureError(SidebarError):
    """Decoded archive is not a valid store (missing items/properties)."""
