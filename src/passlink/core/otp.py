"""
TOTP support for secrets carrying an ``otpauth://`` URI.

Provides:
- otpauth URI parsing
- RFC 6238 code calculation
- lookup of the URI inside a secret
"""

import base64
import hashlib
import hmac
import struct
import time
import urllib.parse
from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import OTPError
from .models import Secret

OTPAUTH_PREFIX = "otpauth://"

_ALGORITHMS = {
    "SHA1": hashlib.sha1,
    "SHA256": hashlib.sha256,
    "SHA512": hashlib.sha512,
}


@dataclass
class TOTPParameters:
    key: bytes
    digits: int = 6
    period: int = 30
    algorithm: str = "SHA1"
    label: str = ""


def _decode_secret(secret: str) -> bytes:
    secret = secret.replace(" ", "").upper()
    missing_padding = len(secret) % 8
    if missing_padding:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except (ValueError, TypeError) as e:
        raise OTPError(f"invalid base32 secret: {e}") from e


def _int_param(query, name: str, default: int) -> int:
    raw = query.get(name, [str(default)])[0]
    try:
        value = int(raw)
    except ValueError:
        raise OTPError(f"invalid {name} '{raw}'")
    if value < 1:
        raise OTPError(f"invalid {name} '{raw}'")
    return value


def parse_otpauth(uri: str) -> TOTPParameters:
    """
    Parse an otpauth URI.

    Args:
        uri: e.g. ``otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP``

    Returns:
        TOTPParameters

    Raises:
        OTPError: If the URI is malformed or not a TOTP URI
    """
    parsed = urllib.parse.urlparse(uri.strip())
    if parsed.scheme != "otpauth":
        raise OTPError(f"not an otpauth URI: scheme '{parsed.scheme}'")
    if parsed.netloc.lower() != "totp":
        raise OTPError(f"unsupported OTP type '{parsed.netloc}'")

    query = urllib.parse.parse_qs(parsed.query)
    secret = query.get("secret", [""])[0]
    if not secret:
        raise OTPError("otpauth URI has no secret")

    algorithm = query.get("algorithm", ["SHA1"])[0].upper()
    if algorithm not in _ALGORITHMS:
        raise OTPError(f"unsupported algorithm '{algorithm}'")

    digits = _int_param(query, "digits", 6)
    if digits > 10:
        raise OTPError(f"invalid digits '{digits}'")

    return TOTPParameters(
        key=_decode_secret(secret),
        digits=digits,
        period=_int_param(query, "period", 30),
        algorithm=algorithm,
        label=urllib.parse.unquote(parsed.path.lstrip("/")),
    )


def totp_code(params: TOTPParameters, at: Optional[float] = None) -> str:
    """Return the TOTP code for the time window containing ``at`` (default now)."""
    if at is None:
        at = time.time()
    counter = int(at // params.period)

    msg = struct.pack(">Q", counter)
    digest = hmac.new(params.key, msg, _ALGORITHMS[params.algorithm]).digest()

    # Dynamic truncation
    offset = digest[-1] & 0x0F
    binary = (
        ((digest[offset] & 0x7F) << 24) |
        ((digest[offset + 1] & 0xFF) << 16) |
        ((digest[offset + 2] & 0xFF) << 8) |
        (digest[offset + 3] & 0xFF)
    )
    otp = binary % (10 ** params.digits)
    return str(otp).zfill(params.digits)


def find_otpauth(secret: Secret) -> Optional[str]:
    """Return the otpauth URI stored in a secret, or None."""
    if secret.password.startswith(OTPAUTH_PREFIX):
        return secret.password

    value = secret.get("totp")
    if isinstance(value, str) and value.strip().startswith(OTPAUTH_PREFIX):
        return value.strip()

    for line in secret.body.splitlines():
        line = line.strip()
        if line.startswith(OTPAUTH_PREFIX):
            return line
    return None


def calculate(secret: Secret, at: Optional[float] = None) -> Tuple[str, str]:
    """
    Compute the current code for a TOTP-bearing secret.

    Returns:
        (code, otpauth URI)

    Raises:
        OTPError: If the secret has no usable otpauth URI
    """
    uri = find_otpauth(secret)
    if uri is None:
        raise OTPError("no otpauth URI found in secret")
    return totp_code(parse_otpauth(uri), at=at), uri
