# src/fuzzloom/arbitraries/text.py
"""String arbitraries: free text over an alphabet, UUIDs and e-mail addresses.

UUIDs and e-mail addresses shrink structurally rather than character by
character, so every candidate keeps the format (version/variant nibbles,
the ``@`` and the ``.`` of the domain).
"""

from __future__ import annotations

import re
import string
from collections.abc import Iterator

from fuzzloom.arbitraries.base import Arbitrary, resolve_size_bounds
from fuzzloom.arbitraries.shrinking import shrink_lengths, shrink_toward
from fuzzloom.contracts.errors import ConfigurationError
from fuzzloom.core.random_source import RandomSource

CHARSETS: dict[str, str] = {
    "alphanumeric": string.ascii_lowercase + string.digits,
    "alpha": string.ascii_lowercase,
    "numeric": string.digits,
    "hex": "0123456789abcdef",
}

DEFAULT_MAX_STRING_LENGTH = 8


def _draw_text(source: RandomSource, alphabet: str, length: int) -> str:
    last = len(alphabet) - 1
    return "".join(alphabet[source.int_between(0, last)] for _ in range(length))


class Strings(Arbitrary[str]):
    """Strings over a fixed alphabet.

    Shrinks by prefix halving (never below ``min_length``), then moves each
    character toward the first character of the alphabet.
    """

    def __init__(
        self,
        length: int | None = None,
        *,
        min_length: int | None = None,
        max_length: int | None = None,
        charset: str = "alphanumeric",
        chars: str | None = None,
    ) -> None:
        self.min_length, self.max_length = resolve_size_bounds(
            length, min_length, max_length, default_max=DEFAULT_MAX_STRING_LENGTH, label="strings"
        )
        if chars is not None:
            if not isinstance(chars, str) or not chars:
                raise ConfigurationError("strings chars must be a non-empty string")
            self.alphabet = chars
        elif charset in CHARSETS:
            self.alphabet = CHARSETS[charset]
        else:
            raise ConfigurationError(f"Unknown charset {charset!r}. Available charsets: {sorted(CHARSETS)}")

    def generate(self, source: RandomSource) -> str:
        length = self.min_length
        if self.max_length != self.min_length:
            length = source.int_between(self.min_length, self.max_length)
        return _draw_text(source, self.alphabet, length)

    def shrink(self, value: str) -> Iterator[str]:
        if not isinstance(value, str) or not self.min_length <= len(value) <= self.max_length:
            return
        if any(char not in self.alphabet for char in value):
            return
        for length in shrink_lengths(len(value), self.min_length):
            yield value[:length]
        for index, char in enumerate(value):
            for position in shrink_toward(self.alphabet.index(char), 0):
                yield value[:index] + self.alphabet[position] + value[index + 1 :]

    def __repr__(self) -> str:
        return f"strings(min_length={self.min_length}, max_length={self.max_length}, chars={self.alphabet!r})"


_UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")
_ZERO_SEGMENTS = ("00000000", "0000", "4000", "8000", "000000000000")
ZERO_UUID = "-".join(_ZERO_SEGMENTS)


class Uuids(Arbitrary[str]):
    """Lowercase version-4 UUID strings."""

    def generate(self, source: RandomSource) -> str:
        digits = [CHARSETS["hex"][source.int_between(0, 15)] for _ in range(32)]
        digits[12] = "4"
        digits[16] = "89ab"[source.int_between(0, 3)]
        text = "".join(digits)
        return f"{text[:8]}-{text[8:12]}-{text[12:16]}-{text[16:20]}-{text[20:]}"

    def shrink(self, value: str) -> Iterator[str]:
        if not isinstance(value, str) or not _UUID_PATTERN.match(value):
            return
        if value == ZERO_UUID:
            return
        yield ZERO_UUID
        segments = value.split("-")
        for index, zeroed in enumerate(_ZERO_SEGMENTS):
            if segments[index] == zeroed:
                continue
            candidate = "-".join([*segments[:index], zeroed, *segments[index + 1 :]])
            if candidate != ZERO_UUID:
                yield candidate

    def __repr__(self) -> str:
        return "uuids()"


class Emails(Arbitrary[str]):
    """Addresses shaped ``local@domain.com`` with lowercase parts.

    Shrinking shortens the local part, then the domain name, never below one
    character each.
    """

    max_local_length = 10
    max_domain_length = 8
    tld = "com"

    def generate(self, source: RandomSource) -> str:
        local = _draw_text(source, CHARSETS["alphanumeric"], source.int_between(1, self.max_local_length))
        domain = _draw_text(source, CHARSETS["alpha"], source.int_between(1, self.max_domain_length))
        return f"{local}@{domain}.{self.tld}"

    def shrink(self, value: str) -> Iterator[str]:
        if not isinstance(value, str):
            return
        local, at, host = value.rpartition("@")
        domain, dot, tld = host.rpartition(".")
        if not (local and at and domain and dot and tld):
            return
        for length in shrink_lengths(len(local), 1):
            yield f"{local[:length]}@{domain}.{tld}"
        for length in shrink_lengths(len(domain), 1):
            yield f"{local}@{domain[:length]}.{tld}"

    def __repr__(self) -> str:
        return "emails()"


# =============================================================================
# Constructors
# =============================================================================


def strings(
    length: int | None = None,
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    charset: str = "alphanumeric",
    chars: str | None = None,
) -> Strings:
    """Strings of a fixed ``length`` or of ``min_length..max_length`` characters.

    Args:
        length: Fixed length. Mutually exclusive with min/max bounds.
        min_length: Minimum length (default 0).
        max_length: Maximum length (default max(min_length, 8)).
        charset: One of "alphanumeric", "alpha", "numeric", "hex".
        chars: Explicit alphabet; overrides ``charset``.
    """
    return Strings(length, min_length=min_length, max_length=max_length, charset=charset, chars=chars)


def uuids() -> Uuids:
    return Uuids()


def emails() -> Emails:
    return Emails()
