"""Formatting of console messages and their serial-line form."""

from __future__ import annotations

from typing import Any, Iterator

from .textutil import isprint

MESSAGE_BUFFER_SIZE = 4096
MAX_MESSAGE_LENGTH = MESSAGE_BUFFER_SIZE - 1

_ESC = "\x1b"


def _signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _unsigned(value: int, bits: int) -> int:
    return value & ((1 << bits) - 1)


def _hex(value: int) -> str:
    return f"0x{value:x}"


def _char(value: Any) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError(f"%c expects a single character, got {value!r}")
        return value
    return chr(value & 0xFF)


def _string(value: Any) -> str:
    return "(null)" if value is None else str(value)


def _strip_hash(value: Any) -> str:
    text = _string(value)
    cut = text.rfind("#")
    return text if cut < 0 else text[:cut]


def _pieces(fmt: str, args: tuple) -> Iterator[str]:
    remaining = iter(args)

    def take() -> Any:
        try:
            return next(remaining)
        except StopIteration:
            raise TypeError(f"not enough arguments for format {fmt!r}") from None

    i = 0
    while i < len(fmt):
        ch = fmt[i]
        if ch != "%":
            yield ch
            i += 1
            continue
        if i + 1 >= len(fmt):
            yield "?"
            return
        spec = fmt[i + 1]
        i += 2
        if spec == "s":
            yield _string(take())
        elif spec == "S":
            text = take()
            length = take()
            yield "(null)" if text is None else str(text)[:length]
        elif spec == "d":
            yield str(_signed(take(), 32))
        elif spec == "u":
            yield str(_unsigned(take(), 32))
        elif spec == "x":
            yield _hex(_unsigned(take(), 32))
        elif spec == "D":
            yield str(_signed(take(), 64))
        elif spec == "U":
            yield str(_unsigned(take(), 64))
        elif spec in ("X", "p"):
            yield _hex(_unsigned(take(), 64))
        elif spec == "c":
            yield _char(take())
        elif spec == "#":
            yield _strip_hash(take())
        else:
            yield "?"


def format_message(fmt: str, *args: Any) -> str:
    """Expand a console format string.

    Supported conversions: ``%s`` (None prints ``(null)``), ``%S`` (string
    and length), ``%d``/``%u``/``%x`` on 32-bit values, ``%D``/``%U``/``%X``
    and ``%p`` on 64-bit values, ``%c``, and ``%#`` which prints a string up
    to its last ``#``. Hexadecimal output carries a ``0x`` prefix; unknown
    conversions print ``?``. The result is cut to ``MAX_MESSAGE_LENGTH``.
    """
    return "".join(_pieces(fmt, args))[:MAX_MESSAGE_LENGTH]


def serial_transform(text: str) -> str:
    """The form of ``text`` sent down a serial line.

    Newlines become CR LF, escape characters pass through, and any other
    non-printable character is dropped.
    """
    out = []
    for ch in text:
        if ch == "\n":
            out.append("\r\n")
        elif ch == _ESC or isprint(ch):
            out.append(ch)
    return "".join(out)