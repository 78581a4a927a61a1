"""
Custom exceptions for framed record storage.

Every failure surfaced by the codec, the file store and the backlog
is one of these, so callers can tell corruption apart from I/O failures
without inspecting messages.
"""


class TribbleStoreError(Exception):
    """Base exception for all tribble store errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FrameError(TribbleStoreError):
    """Base exception for length-prefix codec failures."""


class PayloadTooLargeError(FrameError):
    """Raised when a payload or frame exceeds the representable size."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"maximum allowed bytes {limit} exceeded: found {size}",
            {"size": size, "limit": limit},
        )
        self.size = size
        self.limit = limit


class CorruptFrameError(FrameError):
    """Raised when bytes do not form a well-formed frame."""

    def __init__(self, message: str, offset: int = 0, details: dict | None = None):
        details = dict(details or {})
        details["offset"] = offset
        super().__init__(message, details)
        self.offset = offset


class TooShortForPrefixError(CorruptFrameError):
    """Raised when fewer bytes than the prefix width are available."""

    def __init__(self, available: int, offset: int = 0):
        super().__init__(
            f"no prefixed data found: {available} bytes available at offset {offset}",
            offset,
            {"available": available},
        )
        self.available = available


class TruncatedPayloadError(CorruptFrameError):
    """Raised when the declared payload length runs past the available bytes."""

    def __init__(self, declared: int, available: int, offset: int = 0):
        super().__init__(
            f"missing bytes: frame at offset {offset} declares {declared}, found {available}",
            offset,
            {"declared": declared, "available": available},
        )
        self.declared = declared
        self.available = available


class StorageIOError(TribbleStoreError):
    """Raised when a storage I/O operation fails."""

    def __init__(self, operation: str, path: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
        message = f"Storage I/O error during {operation}"
        if path:
            message += f": {path}"
        super().__init__(message, details)
        self.operation = operation
        self.path = path
        self.cause = cause


class UnknownWriteModeError(TribbleStoreError):
    """Raised when write is called with a mode it does not know."""

    def __init__(self, mode: object):
        super().__init__(f"unknown write mode: {mode!r}", {"mode": repr(mode)})
        self.mode = mode


class ConfigError(TribbleStoreError):
    """Raised when a configuration document cannot be used."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid config {path}: {reason}", {"path": path, "reason": reason})
        self.path = path
        self.reason = reason


class EntryNotFoundError(TribbleStoreError):
    """Raised when a backlog entry is not found."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry not found: {entry_id}", {"entry_id": entry_id})
        self.entry_id = entry_id


class EntryValidationError(TribbleStoreError):
    """Raised when a backlog entry fails validation."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for {field}: {reason}",
            {"field": field, "reason": reason},
        )
        self.field = field
        self.reason = reason
