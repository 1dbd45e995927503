from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import logging
import posixpath

import yaml

logger = logging.getLogger(__name__)

# Metadata keys consulted for the username, in priority order
LOGIN_KEYS = ("login", "username", "user")
LOGIN_FIELDS_KEY = "login_fields"
YAML_MARKER = "---"


def _string_keys(value: Any) -> Any:
    """Turn mapping keys into strings at every nesting level.

    YAML keys may be dates, numbers or null; JSON object keys may not.
    """
    if isinstance(value, dict):
        return {str(k): _string_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_string_keys(v) for v in value]
    return value


def _parse_metadata(body: str) -> Dict[str, Any]:
    """Parse the body of a secret into a metadata mapping.

    Anything that is not a YAML mapping yields an empty mapping.
    """
    if not body.strip():
        return {}
    try:
        data = yaml.safe_load(body)
    except yaml.YAMLError as e:
        logger.debug("Ignoring secret body that is not valid YAML: %s", e)
        return {}
    if not isinstance(data, dict):
        return {}
    return _string_keys(data)


def value_to_text(value: Any) -> str:
    """Render a metadata value the way it would be shown to a user."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n")
    return str(value)


@dataclass
class Secret:
    """A stored credential: a password line followed by an optional body.

    The body may hold a YAML mapping with structured metadata, e.g.::

        s3cr3t
        ---
        login: alice
        login_fields:
          pin: 1234
    """
    password: str = ""
    body: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.metadata = _parse_metadata(self.body)

    @classmethod
    def parse(cls, content) -> 'Secret':
        """Create a Secret from its stored text (str or UTF-8 bytes)."""
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        password, _, body = content.partition("\n")
        return cls(password=password, body=body)

    @classmethod
    def with_login(cls, password: str, login: str) -> 'Secret':
        secret = cls(password=password)
        secret.set("login", login)
        return secret

    def to_text(self) -> str:
        """Serialize the secret back to its stored text form."""
        if not self.body:
            return self.password
        return f"{self.password}\n{self.body}"

    def get(self, key: str) -> Optional[Any]:
        """Return the metadata value for key, or None if absent."""
        return self.metadata.get(key)

    def set(self, key: str, value: Any) -> None:
        """Set a metadata value and re-render the body as YAML.

        Raises:
            ValueError: If the body holds free text instead of a YAML mapping
        """
        if self.body.strip() and not self.metadata:
            raise ValueError("secret body is not a YAML document")
        self.metadata[key] = value
        rendered = yaml.safe_dump(
            self.metadata,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        self.body = f"{YAML_MARKER}\n{rendered}"

    def username(self, name: str) -> str:
        """Resolve the username for this secret stored under name.

        Explicit metadata wins; otherwise the last path component of the
        entry name is used (e.g. ``websites/example.com/alice`` -> ``alice``).
        """
        for key in LOGIN_KEYS:
            value = self.get(key)
            if value is not None and value != "":
                return value_to_text(value)
        return posixpath.basename(name.rstrip("/"))

    def login_fields(self) -> Optional[Dict[str, Any]]:
        """Return the ``login_fields`` mapping, or None if absent or malformed."""
        fields = self.get(LOGIN_FIELDS_KEY)
        if fields is None:
            return None
        if not isinstance(fields, dict):
            logger.debug("Ignoring %s that is not a mapping", LOGIN_FIELDS_KEY)
            return None
        return fields

    def to_dict(self) -> Dict[str, Any]:
        """Return a copy of the metadata mapping (the password is excluded)."""
        return dict(self.metadata)


def resolve_login(name: str, secret: Secret) -> Dict[str, Any]:
    """Build the login response for an entry."""
    result: Dict[str, Any] = {
        "username": secret.username(name),
        "password": secret.password,
    }
    fields = secret.login_fields()
    if fields is not None:
        result["login_fields"] = fields
    return result
