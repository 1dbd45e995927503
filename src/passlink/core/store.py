"""Secret stores consumed by the native messaging API."""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import NotFoundError, StoreError
from .models import Secret

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Entry is not in the password store"


class SecretStore:
    """Base class for secret stores.

    Entries are addressed by slash-delimited names such as
    ``websites/example.com/alice``.
    """

    def exists(self, name: str) -> bool:
        """Return True if an entry with this name is stored."""
        raise NotImplementedError

    def get(self, name: str) -> Secret:
        """Return the secret stored under name.

        Raises:
            NotFoundError: If the entry does not exist
        """
        raise NotImplementedError

    def set(self, name: str, secret: Secret) -> None:
        """Store a secret under name, replacing any previous value."""
        raise NotImplementedError

    def list(self, prefix: str = "") -> List[str]:
        """Return the sorted names of all entries starting with prefix."""
        raise NotImplementedError


def _check_name(name: str) -> str:
    name = (name or "").strip("/")
    if not name:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    parts = name.split("/")
    if any(p in ("", ".", "..") for p in parts):
        raise StoreError(f"Invalid entry name: {name}")
    return name


class MemoryStore(SecretStore):
    """Dictionary backed store, used for tests and the ``request`` command."""

    def __init__(self, secrets: Optional[Dict[str, Secret]] = None):
        self._secrets: Dict[str, str] = {}
        for name, secret in (secrets or {}).items():
            self.set(name, secret)

    def exists(self, name: str) -> bool:
        return (name or "").strip("/") in self._secrets

    def get(self, name: str) -> Secret:
        key = (name or "").strip("/")
        if key not in self._secrets:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        # Hand out a fresh copy so callers cannot mutate stored state
        return Secret.parse(self._secrets[key])

    def set(self, name: str, secret: Secret) -> None:
        self._secrets[_check_name(name)] = secret.to_text()

    def list(self, prefix: str = "") -> List[str]:
        return sorted(n for n in self._secrets if n.startswith(prefix))


class DirectoryStore(SecretStore):
    """Plain-text store keeping each entry in ``<root>/<name>.txt``.

    WARNING: no encryption. Meant for development and testing only.
    """

    SUFFIX = ".txt"

    def __init__(self, root: str = None):
        self.root = Path(root or os.path.expanduser("~/.passlink/store"))

    def _path(self, name: str) -> Path:
        parts = _check_name(name).split("/")
        parts[-1] += self.SUFFIX
        return self.root.joinpath(*parts)

    def exists(self, name: str) -> bool:
        try:
            return self._path(name).is_file()
        except (NotFoundError, StoreError):
            return False

    def get(self, name: str) -> Secret:
        path = self._path(name)
        if not path.is_file():
            raise NotFoundError(NOT_FOUND_MESSAGE)
        try:
            return Secret.parse(path.read_bytes())
        except (OSError, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to read {name}: {e}") from e

    def set(self, name: str, secret: Secret) -> None:
        path = self._path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
            path.write_text(secret.to_text(), encoding="utf-8")
            path.chmod(0o600)
        except OSError as e:
            raise StoreError(f"Failed to write {name}: {e}") from e
        logger.debug("Stored entry %s", name)

    def list(self, prefix: str = "") -> List[str]:
        if not self.root.is_dir():
            return []
        names = []
        for path in self.root.rglob("*" + self.SUFFIX):
            if not path.is_file():
                continue
            name = path.relative_to(self.root).as_posix()[: -len(self.SUFFIX)]
            if name.startswith(prefix):
                names.append(name)
        return sorted(names)
