import base64
import hashlib
import hmac
import struct

import pytest

from passlink.core.models import Secret
from passlink.core.otp import calculate, find_otpauth, parse_otpauth, totp_code
from passlink.errors import OTPError

# RFC 6238 test secret "12345678901234567890"
RFC_SECRET = base64.b32encode(b"12345678901234567890").decode("ascii")


def _reference_totp(key: bytes, at: float, digits: int = 6, period: int = 30) -> str:
    digest = hmac.new(key, struct.pack(">Q", int(at // period)), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    value = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF
    return str(value % 10 ** digits).zfill(digits)


@pytest.mark.parametrize("at, expected", [
    (59, "94287082"),
    (1111111109, "07081804"),
    (1234567890, "89005924"),
])
def test_rfc6238_vectors(at, expected):
    params = parse_otpauth(f"otpauth://totp/rfc?secret={RFC_SECRET}&digits=8")
    assert totp_code(params, at=at) == expected


def test_defaults():
    params = parse_otpauth("otpauth://totp/github-fake-account?secret=rpna55555qyho42j")
    assert params.digits == 6
    assert params.period == 30
    assert params.algorithm == "SHA1"
    assert params.label == "github-fake-account"


def test_code_matches_independent_computation():
    uri = "otpauth://totp/github-fake-account?secret=rpna55555qyho42j"
    key = base64.b32decode("RPNA55555QYHO42J")
    code, returned_uri = calculate(Secret("totp_are_cool", uri), at=1700000000)
    assert returned_uri == uri
    assert code == _reference_totp(key, 1700000000)


def test_period_changes_window():
    p30 = parse_otpauth(f"otpauth://totp/x?secret={RFC_SECRET}")
    p60 = parse_otpauth(f"otpauth://totp/x?secret={RFC_SECRET}&period=60")
    assert totp_code(p60, at=59) == totp_code(p30, at=29)


@pytest.mark.parametrize("uri", [
    "https://example.com/?secret=ABC",
    "otpauth://hotp/x?secret=JBSWY3DPEHPK3PXP&counter=1",
    "otpauth://totp/x",
    "otpauth://totp/x?secret=!!!!",
    "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP&digits=abc",
    "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP&period=0",
    "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP&algorithm=MD5",
])
def test_malformed_uri(uri):
    with pytest.raises(OTPError):
        parse_otpauth(uri)


def test_find_in_password_line():
    uri = "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP"
    assert find_otpauth(Secret(uri, "")) == uri


def test_find_in_totp_field():
    uri = "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP"
    assert find_otpauth(Secret("pw", f"---\nlogin: a\ntotp: {uri}")) == uri


def test_find_in_body_line():
    uri = "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP"
    assert find_otpauth(Secret("pw", f"notes\n  {uri}\n")) == uri


def test_find_none():
    assert find_otpauth(Secret("pw", "login: a")) is None
    with pytest.raises(OTPError):
        calculate(Secret("pw", ""))
