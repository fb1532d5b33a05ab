"""Small text and integer helpers used by the boot loader core."""

from __future__ import annotations

import math

_U64 = (1 << 64) - 1
_U32 = (1 << 32) - 1
_U8 = 0xFF

DEFAULT_BPP = 32


def _code(c: int | str) -> int:
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError(f"expected a single character, got {c!r}")
        return ord(c)
    return c


def isprint(c: int | str) -> bool:
    """Return True for printable 7-bit ASCII, space through tilde."""
    code = _code(c)
    return ord(" ") <= code <= ord("~")


def isspace(c: int | str) -> bool:
    """Return True for tab, newline, vertical tab, form feed, carriage return and space."""
    code = _code(c)
    return ord("\t") <= code <= 0x0D or code == ord(" ")


def digit_to_int(c: int | str) -> int | None:
    """Value of a hexadecimal digit character, or None if it is not one."""
    code = _code(c)
    if ord("a") <= code <= ord("f"):
        return code - ord("a") + 10
    if ord("A") <= code <= ord("F"):
        return code - ord("A") + 10
    if ord("0") <= code <= ord("9"):
        return code - ord("0")
    return None


def strtoui(text: str, base: int = 10) -> tuple[int, int]:
    """Parse an unsigned integer from the start of ``text``.

    Any hexadecimal digit is accepted whatever the base, and parsing stops at
    the first character that is not one. Returns ``(value, end)`` where
    ``end`` is the index of the first unparsed character. The value wraps
    at 64 bits.
    """
    value = 0
    end = 0
    for ch in text:
        digit = digit_to_int(ch)
        if digit is None:
            break
        value = (value * base + digit) & _U64
        end += 1
    return value, end


def parse_resolution(text: str) -> tuple[int, int, int]:
    """Parse ``WIDTHxHEIGHT[xBPP]`` into ``(width, height, bpp)``.

    A missing or zero depth defaults to 32. Raises ValueError when width or
    height is missing or zero.
    """
    res = [0, 0, 0]
    first = 0
    for i in range(3):
        value, consumed = strtoui(text[first:], 10)
        if consumed == 0:
            break
        res[i] = value
        last = first + consumed
        if last >= len(text):
            break
        first = last + 1
    width, height, bpp = res
    if width == 0 or height == 0:
        raise ValueError(f"invalid resolution: {text!r}")
    return width, height, bpp or DEFAULT_BPP


def int_sqrt(value: int) -> int:
    """Integer square root (floor) of an unsigned 64-bit value."""
    if value < 0:
        raise ValueError("square root of a negative number")
    return math.isqrt(value & _U64)


def trailing_zeros(value: int) -> int:
    """Number of trailing zero bits in a 64-bit value; 64 for zero."""
    value &= _U64
    if value == 0:
        return 64
    return (value & -value).bit_length() - 1


def _chars(text: str | bytes, count: int) -> list[int]:
    codes = list(text.encode("latin-1") if isinstance(text, str) else text)
    if len(codes) < count:
        raise ValueError(f"need {count} characters, got {len(codes)}")
    return codes[:count]


def oct2bin(text: str | bytes, count: int) -> int:
    """Interpret the first ``count`` characters as octal digits (32-bit result)."""
    value = 0
    for code in _chars(text, count):
        value = ((value << 3) + code - ord("0")) & _U32
    return value


def hex2bin(text: str | bytes, count: int) -> int:
    """Interpret the first ``count`` characters as hex digits; others count as 0."""
    value = 0
    for code in _chars(text, count):
        digit = digit_to_int(code)
        value = ((value << 4) + (digit or 0)) & _U32
    return value


def bcd_to_int(value: int) -> int:
    """Decode a packed binary-coded-decimal byte."""
    return ((value & 0x0F) + ((value & 0xF0) >> 4) * 10) & _U8


def int_to_bcd(value: int) -> int:
    """Encode a value below 100 as a packed binary-coded-decimal byte."""
    value &= _U8
    return ((value % 10) | (value // 10) << 4) & _U8


def absolute_path(path: str, pwd: str) -> str:
    """Resolve ``path`` against the working directory ``pwd``.

    Handles ``.``, ``..`` and repeated slashes; an absolute path ignores
    ``pwd`` and an empty one returns it unchanged.
    """
    if not path:
        return pwd

    buf: list[str] = []

    def put(i: int, ch: str) -> None:
        while len(buf) <= i:
            buf.append("\0")
        buf[i] = ch

    def at(i: int) -> str:
        return buf[i] if 0 <= i < len(buf) else "\0"

    def src(i: int) -> str:
        return path[i] if i < len(path) else "\0"

    def step_back(ptr: int) -> int:
        while ptr > 0 and at(ptr) != "/":
            ptr -= 1
        return ptr + 1 if ptr == 0 else ptr

    if path[0] != "/":
        buf.extend(pwd)
        ptr = len(buf)
        p = 0
    else:
        buf.append("/")
        ptr = 1
        p = 1

    first = True
    while True:
        c = src(p)
        if first or c == "/":
            if not first:
                p += 1
            first = False
            if src(p) == "/":
                continue
            rest = path[p:]
            if rest in (".", "./"):
                break
            if rest in ("..", "../"):
                ptr = step_back(ptr)
                break
            if rest.startswith("../"):
                ptr = step_back(ptr)
                p += 2
                put(ptr, "\0")
                continue
            if rest.startswith("./"):
                p += 1
                continue
            if ptr - 1 != 0 and at(ptr - 1) != "/":
                put(ptr, "/")
                ptr += 1
            continue
        if c == "\0":
            break
        put(ptr, c)
        p += 1
        ptr += 1

    if at(ptr - 1) == "/" and ptr - 1 != 0:
        ptr -= 1
    return "".join(buf[:ptr])


def inet_pton(text: str) -> bytes:
    """Parse a dotted IPv4 address into four bytes; raises ValueError if invalid."""
    octets = bytearray()
    current = 0
    for i in range(4):
        value, consumed = strtoui(text[current:], 10)
        if consumed == 0:
            raise ValueError(f"invalid IPv4 address: {text!r}")
        current += consumed
        if current >= len(text) and i < 3:
            raise ValueError(f"invalid IPv4 address: {text!r}")
        if value > 255:
            raise ValueError(f"invalid IPv4 address: {text!r}")
        current += 1
        octets.append(value)
    return bytes(octets)


def div_roundup(a: int, b: int) -> int:
    """Integer division rounding up."""
    return (a + (b - 1)) // b


def align_up(value: int, alignment: int) -> int:
    """Round ``value`` up to a multiple of ``alignment``."""
    return div_roundup(value, alignment) * alignment


def align_down(value: int, alignment: int) -> int:
    """Round ``value`` down to a multiple of ``alignment``."""
    return (value // alignment) * alignment