"""Records of exceptions reported by the robot controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union


class RobotExceptionType(IntEnum):
    ROBOT_DISCONNECTED = -1
    ROBOT_ERROR = 6
    SCRIPT_RUNTIME = 10


class RobotErrorSource(IntEnum):
    SAFETY = 99
    GUI = 103
    CONTROLLER = 104
    RTSI = 105
    JOINT = 120
    TOOL = 121
    TP = 122
    JOINT_FPGA = 200
    TOOL_FPGA = 201


class RobotErrorDataType(IntEnum):
    NONE = 0
    UNSIGNED = 1
    SIGNED = 2
    FLOAT = 3
    HEX = 4
    STRING = 5
    JOINT = 6


class RobotErrorLevel(IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2
    FATAL = 3


RobotErrorData = Union[int, float, str]


@dataclass(frozen=True)
class RobotException:
    """A robot-side exception: its kind and when it happened (milliseconds)."""

    type: RobotExceptionType
    timestamp: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", RobotExceptionType(self.type))


@dataclass(frozen=True)
class RobotError(RobotException):
    """A controller or hardware error with code, source, level and extra data."""

    type: RobotExceptionType = field(default=RobotExceptionType.ROBOT_ERROR, init=False)
    timestamp: int
    code: int
    sub_code: int
    source: RobotErrorSource
    level: RobotErrorLevel
    data_type: RobotErrorDataType
    data: RobotErrorData

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "source", RobotErrorSource(self.source))
        object.__setattr__(self, "level", RobotErrorLevel(self.level))
        object.__setattr__(self, "data_type", RobotErrorDataType(self.data_type))


@dataclass(frozen=True)
class RobotRuntimeException(RobotException):
    """A script error on the robot, with the line and column it occurred at."""

    type: RobotExceptionType = field(default=RobotExceptionType.SCRIPT_RUNTIME, init=False)
    timestamp: int
    line: int
    column: int
    message: str