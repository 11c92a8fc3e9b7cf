"""Big-endian packing helpers, string splitting and the package error type."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Reasons an operation of the SDK can fail."""

    SOCKET_CONNECT_FAIL = "socket connect fail"
    SOCKET_FAIL = "socket fail"
    FILE_OPEN_FAIL = "file open fail"
    RTSI_UNKNOWN_VARIABLE_TYPE = "rtsi unknown variable type"
    RTSI_RECIPE_PARSER_FAIL = "rtsi recipe parser fail"


class EliteError(Exception):
    """Error raised by the SDK, carrying an :class:`ErrorCode`."""

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        self.code = code
        self.message = message or code.value
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"


def split_string(text: str, delimiter: str) -> list[str]:
    """Split ``text`` on every occurrence of ``delimiter``."""
    if not text:
        return []
    if not delimiter:
        return [text]
    return text.split(delimiter)


def _format(kind: str) -> str:
    return ">" + kind


def pack(kind: str, value: Any) -> bytes:
    """Pack ``value`` in network (big-endian) order.

    ``kind`` is a :mod:`struct` format such as ``"H"`` or ``"6d"``; a
    sequence value supplies one item per field.
    """
    fmt = _format(kind)
    try:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            return struct.pack(fmt, *value)
        return struct.pack(fmt, value)
    except struct.error as exc:
        raise ValueError(f"cannot pack {value!r} as {kind!r}: {exc}") from exc


def unpack(kind: str, data: bytes, offset: int = 0) -> tuple[Any, int]:
    """Read a big-endian value of ``kind`` from ``data`` at ``offset``.

    Returns the value (a list for multi-field kinds) and the offset just
    past it.
    """
    fmt = _format(kind)
    try:
        values = struct.unpack_from(fmt, data, offset)
    except struct.error as exc:
        raise ValueError(f"cannot unpack {kind!r} at offset {offset}: {exc}") from exc
    result = values[0] if len(values) == 1 else list(values)
    return result, offset + struct.calcsize(fmt)