"""passlink core - secrets, stores and the collaborators of the protocol engine.

This package holds the secret field model, the store interface with its
in-memory and directory backends, TOTP calculation, password generation,
the clipboard adapter and version handling.
"""

from .models import Secret, resolve_login
from .store import SecretStore, MemoryStore, DirectoryStore
from .version import Version

__all__ = [
    'Secret',
    'resolve_login',
    'SecretStore',
    'MemoryStore',
    'DirectoryStore',
    'Version',
]
