"""GUID parsing in big-endian and mixed-endian string forms."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass

_LAYOUT = struct.Struct("<IHH8s")
_GUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


@dataclass(frozen=True)
class Guid:
    """A 16-byte GUID with the usual a/b/c/d field layout."""

    a: int
    b: int
    c: int
    d: bytes

    @classmethod
    def from_bytes(cls, raw: bytes) -> Guid:
        """Build a GUID from its 16-byte in-memory (little-endian fields) form."""
        if len(raw) != 16:
            raise ValueError("a GUID is 16 bytes long")
        a, b, c, d = _LAYOUT.unpack(raw)
        return cls(a, b, c, d)

    def to_bytes(self) -> bytes:
        """The 16-byte in-memory form of this GUID."""
        return _LAYOUT.pack(self.a, self.b, self.c, self.d)


def is_valid_guid(text: str) -> bool:
    """True if ``text`` is a 36-character hyphenated hexadecimal GUID."""
    return _GUID_RE.fullmatch(text) is not None


def _clusters(text: str) -> list[bytes]:
    if not is_valid_guid(text):
        raise ValueError(f"invalid GUID: {text!r}")
    return [bytes.fromhex(part) for part in text.split("-")]


def guid_from_string_be(text: str) -> Guid:
    """Parse a GUID whose bytes appear in memory in string order."""
    return Guid.from_bytes(b"".join(_clusters(text)))


def guid_from_string_mixed(text: str) -> Guid:
    """Parse a GUID in the standard mixed-endian form."""
    parts = _clusters(text)
    raw = parts[0][::-1] + parts[1][::-1] + parts[2][::-1] + parts[3] + parts[4]
    return Guid.from_bytes(raw)