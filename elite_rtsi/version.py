"""Four-part version numbers of controller software and of this SDK."""

from __future__ import annotations

from dataclasses import dataclass

_UINT32_MAX = 0xFFFFFFFF


@dataclass(frozen=True, order=True)
class VersionInfo:
    """A version ``major.minor.bugfix.build``, ordered field by field."""

    major: int = 0
    minor: int = 0
    bugfix: int = 0
    build: int = 0

    @classmethod
    def from_string(cls, text: str) -> VersionInfo:
        """Parse ``"major.minor.bugfix.build"``; missing trailing parts are 0."""
        parts = text.strip().split(".")
        if not 1 <= len(parts) <= 4:
            raise ValueError(f"invalid version string: {text!r}")
        numbers = []
        for part in parts:
            part = part.strip()
            if not part.isdigit():
                raise ValueError(f"invalid version string: {text!r}")
            number = int(part)
            if number > _UINT32_MAX:
                raise ValueError(f"version field out of range: {text!r}")
            numbers.append(number)
        return cls(*numbers)

    def to_string(self) -> str:
        return f"{self.major}.{self.minor}.{self.bugfix}.{self.build}"

    def __str__(self) -> str:
        return self.to_string()


SDK_VERSION_INFO = VersionInfo(1, 2, 0, 0)