import json

import pytest

from passlink.native.manifest import HOST_NAME, build_manifest, default_manifest_dir, write_manifest


def test_chrome_manifest():
    manifest = build_manifest("chrome", "/usr/bin/passlink-host", ["abcdef"])
    assert manifest == {
        "name": HOST_NAME,
        "description": "passlink native messaging host",
        "path": "/usr/bin/passlink-host",
        "type": "stdio",
        "allowed_origins": ["chrome-extension://abcdef/"],
    }


def test_firefox_manifest():
    manifest = build_manifest("firefox", "/usr/bin/passlink-host", ["a@example.org", "b@example.org"])
    assert manifest["allowed_extensions"] == ["a@example.org", "b@example.org"]
    assert "allowed_origins" not in manifest


def test_invalid_input():
    with pytest.raises(ValueError):
        build_manifest("netscape", "/x", ["id"])
    with pytest.raises(ValueError):
        build_manifest("chrome", "/x", [])


def test_default_dirs():
    assert str(default_manifest_dir("firefox", "linux")).endswith(".mozilla/native-messaging-hosts")
    assert "Chromium" in str(default_manifest_dir("chromium", "darwin"))


def test_write_manifest(tmp_path):
    manifest = build_manifest("chromium", "/x", ["id"])
    path = write_manifest(manifest, tmp_path / "hosts")
    assert path.name == f"{HOST_NAME}.json"
    assert json.loads(path.read_text()) == manifest
