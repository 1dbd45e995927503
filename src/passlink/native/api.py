"""Request dispatcher of the native messaging API.

One call to :meth:`API.read_and_respond` reads one frame, answers it and
writes one frame. On any error nothing is written, so the caller only ever
sees complete responses.
"""
from __future__ import annotations

import json
import logging
from typing import Any, BinaryIO, Dict, List, Optional

from ..core.clipboard import Clipboard, SystemClipboard
from ..core.generator import DefaultGenerator, PasswordGenerator
from ..core.models import Secret, resolve_login, value_to_text
from ..core.otp import calculate, find_otpauth
from ..core.store import SecretStore
from ..core.version import Version
from ..errors import (
    ClipboardError,
    ConflictError,
    JSONError,
    NotFoundError,
    UnknownTypeError,
)
from .framing import DEFAULT_MAX_READ_SIZE, read_message, write_message
from .matching import query_entries, query_host
from .messages import (
    JSON_ERROR_PREFIX,
    MESSAGE_CLASSES,
    CopyToClipboardMessage,
    CreateMessage,
    GetDataMessage,
    GetLoginMessage,
    Message,
    MessageType,
    QueryHostMessage,
    QueryMessage,
)

logger = logging.getLogger(__name__)


def parse_message(payload: bytes) -> Message:
    """Decode a JSON payload into a typed message.

    Raises:
        JSONError: If the payload is not a JSON object or a field is invalid
        UnknownTypeError: If the type is absent or unsupported
    """
    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise JSONError(f"{JSON_ERROR_PREFIX}: {e}") from e
    if not isinstance(data, dict):
        raise JSONError(f"{JSON_ERROR_PREFIX}: expected an object, got {type(data).__name__}")

    raw_type = data.get("type")
    try:
        mtype = MessageType(raw_type)
    except ValueError:
        shown = "" if raw_type is None else raw_type
        raise UnknownTypeError(f"unknown message of type '{shown}'") from None
    return MESSAGE_CLASSES[mtype].from_dict(data)


class API:
    """Answers native messaging requests against a secret store."""

    def __init__(
        self,
        store: SecretStore,
        reader: Optional[BinaryIO] = None,
        writer: Optional[BinaryIO] = None,
        version: Optional[Version] = None,
        clipboard: Optional[Clipboard] = None,
        generator: Optional[PasswordGenerator] = None,
        max_message_size: int = DEFAULT_MAX_READ_SIZE,
    ):
        if version is None:
            from .. import __version__
            version = Version.parse(__version__)
        self.store = store
        self.reader = reader
        self.writer = writer
        self.version = version
        self.clipboard = clipboard if clipboard is not None else SystemClipboard()
        self.generator = generator if generator is not None else DefaultGenerator()
        self.max_message_size = max_message_size

    def read_and_respond(self) -> None:
        """Read one request frame and write the response frame."""
        payload = read_message(self.reader, self.max_message_size)
        response = self.respond(payload)
        write_message(self.writer, response)

    def respond(self, payload: bytes) -> bytes:
        """Answer one JSON payload with a JSON payload."""
        message = parse_message(payload)
        logger.debug("Handling %s message", message.type.value)
        result = self.handle(message)
        try:
            return json.dumps(result, default=str, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise JSONError(f"failed to marshal JSON response: {e}") from e

    def handle(self, message: Message) -> Any:
        mtype = message.type
        if mtype == MessageType.GET_VERSION:
            return self.version.to_dict()
        if mtype == MessageType.QUERY:
            return self._query(message)
        if mtype == MessageType.QUERY_HOST:
            return self._query_host(message)
        if mtype == MessageType.GET_LOGIN:
            return self._get_login(message)
        if mtype == MessageType.GET_DATA:
            return self._get_data(message)
        if mtype == MessageType.CREATE:
            return self._create(message)
        if mtype == MessageType.COPY_TO_CLIPBOARD:
            return self._copy_to_clipboard(message)
        raise UnknownTypeError(f"unknown message of type '{mtype}'")

    def _get_secret(self, name: str) -> Secret:
        try:
            return self.store.get(name)
        except NotFoundError as e:
            raise NotFoundError(f"failed to get secret: {e}") from e

    def _query(self, message: QueryMessage) -> List[str]:
        return query_entries(self.store.list(), message.query)

    def _query_host(self, message: QueryHostMessage) -> List[str]:
        return query_host(self.store.list(), message.host)

    def _get_login(self, message: GetLoginMessage) -> Dict[str, Any]:
        secret = self._get_secret(message.entry)
        return resolve_login(message.entry, secret)

    def _get_data(self, message: GetDataMessage) -> Dict[str, Any]:
        secret = self._get_secret(message.entry)
        if find_otpauth(secret) is not None:
            code, uri = calculate(secret)
            return {"current_totp": code, "otpauth": uri}
        return secret.to_dict()

    def _create(self, message: CreateMessage) -> Dict[str, Any]:
        if self.store.exists(message.entry_name):
            raise ConflictError(f"secret {message.entry_name} already exists")

        if message.generate:
            password = self.generator.generate(message.length, message.use_symbols)
        else:
            password = message.password

        secret = Secret.with_login(password, message.login)
        self.store.set(message.entry_name, secret)
        logger.info("Created entry %s", message.entry_name)
        return resolve_login(message.entry_name, secret)

    def _copy_to_clipboard(self, message: CopyToClipboardMessage) -> Dict[str, str]:
        secret = self._get_secret(message.entry)
        if message.key:
            value = secret.get(message.key)
            if value is None:
                raise NotFoundError("failed to get secret sub entry: key not found in YAML document")
            text = value_to_text(value)
        else:
            text = secret.password

        try:
            self.clipboard.copy(text.encode("utf-8"))
        except ClipboardError as e:
            raise ClipboardError(f"failed to copy to clipboard: {e}") from e
        return {"status": "ok"}
