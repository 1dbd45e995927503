"""
Native Messaging host for passlink.

The browser spawns this process and talks to it over stdin/stdout.

Protocol: newline-free JSON messages with 4-byte little-endian length prefix.
Messages:
  {"type":"getVersion"}
  {"type":"query", "query":"example"}
  {"type":"queryHost", "host":"login.example.com"}
  {"type":"getLogin", "entry":"websites/example.com/alice"}
  {"type":"getData", "entry":"websites/example.com/alice"}
  {"type":"create", "entry_name":"...", "login":"...", "password":"...",
   "generate":false, "length":24, "use_symbols":true}
  {"type":"copyToClipboard", "entry":"...", "key":"pin"}

A failed request gets no response frame at all. stdout carries frames only,
so logging goes to stderr or to PASSLINK_LOG_FILE.
"""
from __future__ import annotations

import logging
import sys
from typing import BinaryIO, Optional

from rich.console import Console
from rich.logging import RichHandler

from ..config import HostSettings
from ..core.clipboard import DisabledClipboard, SystemClipboard
from ..core.generator import DefaultGenerator
from ..core.store import DirectoryStore, SecretStore
from ..errors import FramingError, PasslinkError, StreamClosed
from .api import API

logger = logging.getLogger(__name__)


def configure_logging(settings: HostSettings) -> None:
    """Route log records away from stdout."""
    level = logging.DEBUG if settings.debug else logging.INFO
    if settings.log_file:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    else:
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def build_api(
    settings: HostSettings,
    reader: BinaryIO,
    writer: BinaryIO,
    store: Optional[SecretStore] = None,
) -> API:
    if store is None:
        store = DirectoryStore(settings.store_dir)
    clipboard = SystemClipboard() if settings.clipboard else DisabledClipboard()
    return API(
        store,
        reader,
        writer,
        clipboard=clipboard,
        generator=DefaultGenerator(settings.password_mode),
        max_message_size=settings.max_message_size,
    )


def run_host(api: API) -> int:
    """Serve requests until the input stream closes.

    Returns:
        Number of requests answered successfully
    """
    answered = 0
    while True:
        try:
            api.read_and_respond()
        except StreamClosed:
            logger.debug("Input stream closed")
            break
        except FramingError as e:
            logger.error("Dropping session after framing error: %s", e)
            break
        except PasslinkError as e:
            # No frame is written for a failed request
            logger.error("Request failed: %s", e)
            continue
        except OSError as e:
            logger.error("Dropping session after I/O error: %s", e)
            break
        except Exception:
            logger.exception("Unexpected error while handling request")
            continue
        answered += 1
    return answered


def main(settings: Optional[HostSettings] = None) -> None:
    settings = settings or HostSettings.from_env()
    configure_logging(settings)
    api = build_api(settings, sys.stdin.buffer, sys.stdout.buffer)
    logger.debug("Serving native messaging requests from %s", settings.store_dir)
    run_host(api)


if __name__ == "__main__":
    main()
