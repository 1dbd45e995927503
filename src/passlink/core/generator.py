"""Password generation used when creating entries."""

import secrets
import string
from typing import Protocol

from ..errors import GeneratorError

DIGITS = string.digits
UPPER = string.ascii_uppercase
LOWER = string.ascii_lowercase
SYMBOLS = "!#$%&()*+,-./:;<=>?@[]^_{|}~"

_CONSONANTS = "bcdfghjklmnpqrstvwxz"
_VOWELS = "aeiouy"


class PasswordGenerator(Protocol):
    def generate(self, length: int, use_symbols: bool) -> str:
        ...


def _check_length(length: int, minimum: int = 1) -> None:
    if length < 1:
        raise GeneratorError("password length must not be zero")
    if length < minimum:
        raise GeneratorError(f"password length must be at least {minimum}")


def _shuffled(chars: list) -> str:
    # Fisher-Yates with a CSPRNG
    for i in range(len(chars) - 1, 0, -1):
        j = secrets.randbelow(i + 1)
        chars[i], chars[j] = chars[j], chars[i]
    return "".join(chars)


def generate_password(length: int, use_symbols: bool = False) -> str:
    """Generate a random password from letters and digits, plus symbols if requested."""
    _check_length(length)
    alphabet = DIGITS + UPPER + LOWER
    if use_symbols:
        alphabet += SYMBOLS
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_password_with_all_classes(length: int) -> str:
    """Generate a password containing at least one character of every class."""
    classes = [DIGITS, UPPER, LOWER, SYMBOLS]
    _check_length(length, minimum=len(classes))
    chars = [secrets.choice(c) for c in classes]
    alphabet = "".join(classes)
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(classes)))
    return _shuffled(chars)


def generate_memorable_password(length: int, use_symbols: bool = False) -> str:
    """Generate a pronounceable password of alternating consonants and vowels.

    One letter is upper-cased and one digit (plus one symbol, if requested)
    is mixed in, as long as the length leaves room for them.
    """
    _check_length(length)
    extras = [secrets.choice(DIGITS)]
    if use_symbols:
        extras.append(secrets.choice(SYMBOLS))
    extras = extras[: max(0, length - 1)]

    letters = []
    for i in range(length - len(extras)):
        letters.append(secrets.choice(_CONSONANTS if i % 2 == 0 else _VOWELS))
    pos = secrets.randbelow(len(letters))
    letters[pos] = letters[pos].upper()

    # Append extras so the syllables stay readable
    return "".join(letters + extras)


PASSWORD_MODES = ("default", "strict", "memorable")


class DefaultGenerator:
    """Character-class generator, optionally memorable or strict.

    ``strict`` ignores use_symbols and always mixes in every character class.
    """

    def __init__(self, mode: str = "default"):
        if mode not in PASSWORD_MODES:
            raise ValueError(f"Unknown password mode: {mode}")
        self.mode = mode

    def generate(self, length: int, use_symbols: bool) -> str:
        if self.mode == "strict":
            return generate_password_with_all_classes(length)
        if self.mode == "memorable":
            return generate_memorable_password(length, use_symbols)
        return generate_password(length, use_symbols)
