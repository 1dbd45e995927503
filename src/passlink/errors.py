"""Exceptions raised by the passlink protocol engine and its collaborators."""


class PasslinkError(Exception):
    """Base exception for passlink errors."""
    pass


class FramingError(PasslinkError):
    """Raised when a length-prefixed frame is truncated or malformed."""
    pass


class StreamClosed(FramingError):
    """Raised when the input stream ends before a new frame starts."""
    pass


class JSONError(PasslinkError):
    """Raised when a payload is not a valid JSON message."""
    pass


class UnknownTypeError(PasslinkError):
    """Raised when a message carries an absent or unsupported type."""
    pass


class NotFoundError(PasslinkError):
    """Raised when an entry or a sub entry does not exist."""
    pass


class ConflictError(PasslinkError):
    """Raised when creating an entry that already exists."""
    pass


class OTPError(PasslinkError):
    """Raised for malformed otpauth URIs."""
    pass


class GeneratorError(PasslinkError):
    """Raised when password generation is not possible."""
    pass


class ClipboardError(PasslinkError):
    """Raised when the clipboard collaborator fails."""
    pass


class StoreError(PasslinkError):
    """Raised when the store cannot read or write an entry."""
    pass
