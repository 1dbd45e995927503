"""Clipboard collaborator for the ``copyToClipboard`` message."""

import logging
from typing import Protocol

import pyperclip

from ..errors import ClipboardError

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    def copy(self, value: bytes) -> None:
        ...


class SystemClipboard:
    """Copies values to the desktop clipboard via pyperclip."""

    def copy(self, value: bytes) -> None:
        try:
            pyperclip.copy(value.decode("utf-8"))
        except pyperclip.PyperclipException as e:
            raise ClipboardError(str(e)) from e
        logger.debug("Copied %d bytes to the clipboard", len(value))


class DisabledClipboard:
    """Clipboard that refuses every copy, for headless sessions."""

    def copy(self, value: bytes) -> None:
        raise ClipboardError("clipboard support is disabled")
