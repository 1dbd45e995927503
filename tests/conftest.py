"""Shared fixtures for the passlink test suite."""
import io
import json
import struct

import pytest

from passlink.core.models import Secret
from passlink.core.store import MemoryStore
from passlink.core.version import Version
from passlink.errors import ClipboardError
from passlink.native.api import API


class FakeClipboard:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.copied = []

    def copy(self, value: bytes) -> None:
        if self.fail:
            raise ClipboardError("no clipboard available")
        self.copied.append(value)


def frame(message) -> bytes:
    """Length-prefix a str/bytes payload."""
    if isinstance(message, str):
        message = message.encode("utf-8")
    return struct.pack("<I", len(message)) + message


def unframe(raw: bytes) -> bytes:
    (length,) = struct.unpack("<I", raw[:4])
    assert length == len(raw) - 4
    return raw[4:]


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def secrets():
    return {
        "awesomePrefix/foo/bar": Secret("20", ""),
        "awesomePrefix/fixed/secret": Secret("moar", ""),
        "awesomePrefix/fixed/yamllogin": Secret("thesecret", "---\nlogin: muh"),
        "awesomePrefix/fixed/yamlother": Secret("thesecret", "---\nother: meh"),
        "awesomePrefix/some.other.host/other": Secret("thesecret", "---\nother: meh"),
        "awesomePrefix/b/some.other.host": Secret("thesecret", "---\nother: meh"),
        "awesomePrefix/evilsome.other.host": Secret("thesecret", "---\nother: meh"),
        "evilsome.other.host/something": Secret("thesecret", "---\nother: meh"),
        "awesomePrefix/other.host/other": Secret("thesecret", "---\nother: meh"),
        "somename/github.com": Secret("thesecret", "---\nother: meh"),
        "login_entry": Secret(
            "thepass",
            "---\nlogin: thelogin\nignore: me\nlogin_fields:\n  first: 42\n  second: ok\n"
            "nologin_fields:\n  subentry: 123",
        ),
        "invalid_login_entry": Secret(
            "thepass", '---\nlogin: thelogin\nignore: me\nlogin_fields: "invalid"'
        ),
    }


@pytest.fixture
def store(secrets):
    return MemoryStore(secrets)


@pytest.fixture
def api(store, clipboard):
    return API(
        store,
        io.BytesIO(),
        io.BytesIO(),
        version=Version.parse("1.2.3-test"),
        clipboard=clipboard,
    )


@pytest.fixture
def ask(api):
    """Send one framed message through read_and_respond and decode the answer."""
    def _ask(message):
        if not isinstance(message, (str, bytes)):
            message = json.dumps(message)
        api.reader = io.BytesIO(frame(message))
        api.writer = io.BytesIO()
        api.read_and_respond()
        return json.loads(unframe(api.writer.getvalue()))
    return _ask
