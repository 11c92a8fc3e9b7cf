"""RTSI recipes: named variables with types announced by the controller."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import Any

from elite_rtsi.datatypes import RtsiType
from elite_rtsi.utils import EliteError, ErrorCode, pack, split_string, unpack

_RECIPE_ID_INDEX = 3
_PAYLOAD_START = 4


class RtsiRecipe:
    """A list of RTSI variables, their types, current values and recipe id."""

    def __init__(self, recipe_list: Iterable[str]) -> None:
        self.names: tuple[str, ...] = tuple(recipe_list)
        self.id: int = 0
        self._types: dict[str, RtsiType] = {}
        self._values: dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def types(self) -> dict[str, RtsiType]:
        with self._lock:
            return dict(self._types)

    def parse_type_package(self, package: bytes) -> None:
        """Take the recipe id and variable types from a setup reply message."""
        with self._lock:
            self.id = package[_RECIPE_ID_INDEX]
            types_text = bytes(package[_PAYLOAD_START:]).decode("ascii", errors="replace")
            type_names = split_string(types_text, ",")
            if len(type_names) != len(self.names):
                raise EliteError(ErrorCode.RTSI_RECIPE_PARSER_FAIL, "not match recipe")
            for name, type_name in zip(self.names, type_names):
                try:
                    rtsi_type = RtsiType.from_name(type_name)
                except EliteError:
                    raise EliteError(
                        ErrorCode.RTSI_UNKNOWN_VARIABLE_TYPE,
                        f'variable "{name}" error type: {type_name}',
                    ) from None
                if name not in self._types:
                    self._types[name] = rtsi_type
                    self._values[name] = rtsi_type.default()

    def parse_data_package(self, package: bytes) -> bool:
        """Update values from a data message; False if it is for another recipe."""
        with self._lock:
            if package[_RECIPE_ID_INDEX] != self.id:
                return False
            if any(name not in self._types for name in self.names):
                return False
            offset = _PAYLOAD_START
            decoded: dict[str, Any] = {}
            for name in self.names:
                rtsi_type = self._types[name]
                if rtsi_type is RtsiType.BOOL:
                    value, offset = package[offset] != 0, offset + 1
                elif rtsi_type is RtsiType.UINT8:
                    value, offset = package[offset], offset + 1
                else:
                    try:
                        value, offset = unpack(rtsi_type.fmt, package, offset)
                    except ValueError as exc:
                        raise EliteError(ErrorCode.RTSI_RECIPE_PARSER_FAIL, str(exc)) from exc
                decoded[name] = value
            self._values.update(decoded)
            return True

    def pack_to_bytes(self) -> bytes:
        """Serialise the recipe id followed by every value, in recipe order."""
        with self._lock:
            parts = [bytes([self.id])]
            for name in self.names:
                if name not in self._types:
                    raise EliteError(ErrorCode.RTSI_RECIPE_PARSER_FAIL, "bad recipe")
                parts.append(pack(self._types[name].fmt, self._values[name]))
            return b"".join(parts)

    def get_value(self, name: str) -> Any:
        """Current value of ``name``; raises KeyError if not in the recipe."""
        with self._lock:
            if name not in self._types:
                raise KeyError(name)
            value = self._values[name]
            return list(value) if isinstance(value, list) else value

    def set_value(self, name: str, value: Any) -> None:
        """Set ``name``; raises KeyError if unknown, ValueError if it does not fit."""
        with self._lock:
            if name not in self._types:
                raise KeyError(name)
            rtsi_type = self._types[name]
            if rtsi_type is RtsiType.BOOL:
                self._values[name] = bool(value)
                return
            pack(rtsi_type.fmt, value)
            if isinstance(value, (list, tuple)):
                value = list(value)
            self._values[name] = value