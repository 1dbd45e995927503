"""Typed request messages of the native messaging API."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..errors import JSONError

JSON_ERROR_PREFIX = "failed to unmarshal JSON message"


class MessageType(str, Enum):
    GET_VERSION = "getVersion"
    QUERY = "query"
    QUERY_HOST = "queryHost"
    GET_LOGIN = "getLogin"
    GET_DATA = "getData"
    CREATE = "create"
    COPY_TO_CLIPBOARD = "copyToClipboard"


def _field(data: Dict[str, Any], name: str, kind: type, default: Any = None, required: bool = True) -> Any:
    if name not in data or data[name] is None:
        if required:
            raise JSONError(f"{JSON_ERROR_PREFIX}: missing field '{name}'")
        return default
    value = data[name]
    # bool is an int subclass, do not accept it where a number is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise JSONError(
            f"{JSON_ERROR_PREFIX}: field '{name}' must be of type {kind.__name__}"
        )
    return value


@dataclass
class GetVersionMessage:
    type = MessageType.GET_VERSION

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GetVersionMessage':
        return cls()


@dataclass
class QueryMessage:
    query: str
    type = MessageType.QUERY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueryMessage':
        return cls(query=_field(data, "query", str))


@dataclass
class QueryHostMessage:
    host: str
    type = MessageType.QUERY_HOST

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueryHostMessage':
        return cls(host=_field(data, "host", str))


@dataclass
class GetLoginMessage:
    entry: str
    type = MessageType.GET_LOGIN

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GetLoginMessage':
        return cls(entry=_field(data, "entry", str))


@dataclass
class GetDataMessage:
    entry: str
    type = MessageType.GET_DATA

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GetDataMessage':
        return cls(entry=_field(data, "entry", str))


@dataclass
class CreateMessage:
    entry_name: str
    login: str
    password: str = ""
    length: int = 0
    generate: bool = False
    use_symbols: bool = False
    type = MessageType.CREATE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CreateMessage':
        generate = _field(data, "generate", bool, default=False, required=False)
        return cls(
            entry_name=_field(data, "entry_name", str),
            login=_field(data, "login", str),
            password=_field(data, "password", str, default="", required=not generate),
            length=_field(data, "length", int, default=0, required=generate),
            generate=generate,
            use_symbols=_field(data, "use_symbols", bool, default=False, required=False),
        )


@dataclass
class CopyToClipboardMessage:
    entry: str
    key: Optional[str] = None
    type = MessageType.COPY_TO_CLIPBOARD

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CopyToClipboardMessage':
        return cls(
            entry=_field(data, "entry", str),
            key=_field(data, "key", str, required=False) or None,
        )


Message = Union[
    GetVersionMessage,
    QueryMessage,
    QueryHostMessage,
    GetLoginMessage,
    GetDataMessage,
    CreateMessage,
    CopyToClipboardMessage,
]

MESSAGE_CLASSES = {
    MessageType.GET_VERSION: GetVersionMessage,
    MessageType.QUERY: QueryMessage,
    MessageType.QUERY_HOST: QueryHostMessage,
    MessageType.GET_LOGIN: GetLoginMessage,
    MessageType.GET_DATA: GetDataMessage,
    MessageType.CREATE: CreateMessage,
    MessageType.COPY_TO_CLIPBOARD: CopyToClipboardMessage,
}
