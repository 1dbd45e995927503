"""Native messaging host manifests for Chrome, Chromium and Firefox."""
from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

HOST_NAME = "com.passlink.native"
DESCRIPTION = "passlink native messaging host"

# Per-user manifest directories
MANIFEST_DIRS: Dict[str, Dict[str, str]] = {
    "chrome": {
        "linux": "~/.config/google-chrome/NativeMessagingHosts",
        "darwin": "~/Library/Application Support/Google/Chrome/NativeMessagingHosts",
    },
    "chromium": {
        "linux": "~/.config/chromium/NativeMessagingHosts",
        "darwin": "~/Library/Application Support/Chromium/NativeMessagingHosts",
    },
    "firefox": {
        "linux": "~/.mozilla/native-messaging-hosts",
        "darwin": "~/Library/Application Support/Mozilla/NativeMessagingHosts",
    },
}

BROWSERS = sorted(MANIFEST_DIRS)


def build_manifest(browser: str, wrapper: str, extension_ids: List[str]) -> Dict[str, Any]:
    """Return the manifest dict for a browser.

    Chromium based browsers list allowed origins, Firefox lists extension IDs.
    """
    if browser not in MANIFEST_DIRS:
        raise ValueError(f"Unsupported browser: {browser}")
    if not extension_ids:
        raise ValueError("At least one extension ID is required")

    manifest: Dict[str, Any] = {
        "name": HOST_NAME,
        "description": DESCRIPTION,
        "path": wrapper,
        "type": "stdio",
    }
    if browser == "firefox":
        manifest["allowed_extensions"] = list(extension_ids)
    else:
        manifest["allowed_origins"] = [f"chrome-extension://{eid}/" for eid in extension_ids]
    return manifest


def default_manifest_dir(browser: str, platform: Optional[str] = None) -> Path:
    platform = platform or sys.platform
    key = "darwin" if platform == "darwin" else "linux"
    try:
        return Path(os.path.expanduser(MANIFEST_DIRS[browser][key]))
    except KeyError:
        raise ValueError(f"Unsupported browser: {browser}")


def write_manifest(manifest: Dict[str, Any], directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{manifest['name']}.json"
    path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote native messaging manifest %s", path)
    return path
