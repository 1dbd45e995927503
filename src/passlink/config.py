"""Runtime settings for the native messaging host.

Settings come from the environment so that the browser-spawned process,
which receives no useful command line, can still be configured:

  PASSLINK_STORE_DIR          directory of the plain-text store
  PASSLINK_LOG_FILE           log to this file instead of stderr
  PASSLINK_DEBUG              "1" enables debug logging
  PASSLINK_NO_CLIPBOARD       "1" disables copyToClipboard
  PASSLINK_PASSWORD_MODE      "default", "strict" or "memorable" generated passwords
  PASSLINK_MAX_MESSAGE_SIZE   largest request frame accepted, in bytes
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .core.generator import PASSWORD_MODES
from .native.framing import DEFAULT_MAX_READ_SIZE

DEFAULT_STORE_DIR = os.path.expanduser("~/.passlink/store")

_TRUE_VALUES = ("1", "true", "yes", "on")


def _flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in _TRUE_VALUES


def _password_mode(env: Mapping[str, str]) -> str:
    mode = env.get("PASSLINK_PASSWORD_MODE", "").strip().lower() or "default"
    if mode not in PASSWORD_MODES:
        raise ValueError(
            f"PASSLINK_PASSWORD_MODE must be one of {', '.join(PASSWORD_MODES)}, got {mode!r}"
        )
    return mode


def _size(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of bytes, got {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass
class HostSettings:
    store_dir: str = DEFAULT_STORE_DIR
    log_file: Optional[str] = None
    debug: bool = False
    clipboard: bool = True
    password_mode: str = "default"
    max_message_size: int = DEFAULT_MAX_READ_SIZE

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'HostSettings':
        env = os.environ if env is None else env
        return cls(
            store_dir=os.path.expanduser(env.get("PASSLINK_STORE_DIR") or DEFAULT_STORE_DIR),
            log_file=env.get("PASSLINK_LOG_FILE") or None,
            debug=_flag(env, "PASSLINK_DEBUG"),
            clipboard=not _flag(env, "PASSLINK_NO_CLIPBOARD"),
            password_mode=_password_mode(env),
            max_message_size=_size(env, "PASSLINK_MAX_MESSAGE_SIZE", DEFAULT_MAX_READ_SIZE),
        )
