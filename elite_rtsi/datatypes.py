"""Enumerations and value types shared by the robot interfaces."""

from __future__ import annotations

import struct
from enum import Enum, IntEnum
from typing import Any

from elite_rtsi.utils import EliteError, ErrorCode

POS_ZOOM_RATIO = 1000000
COMMON_ZOOM_RATIO = 1000000
TIME_ZOOM_RATIO = 1000


class RobotMode(IntEnum):
    UNKNOWN = -2
    NO_CONTROLLER = -1
    DISCONNECTED = 0
    CONFIRM_SAFETY = 1
    BOOTING = 2
    POWER_OFF = 3
    POWER_ON = 4
    IDLE = 5
    BACKDRIVE = 6
    RUNNING = 7
    UPDATING_FIRMWARE = 8
    WAITING_CALIBRATION = 9


class JointMode(IntEnum):
    MODE_RESET = 235
    MODE_SHUTTING_DOWN = 236
    MODE_BACKDRIVE = 238
    MODE_POWER_OFF = 239
    MODE_READY_FOR_POWEROFF = 240
    MODE_NOT_RESPONDING = 245
    MODE_MOTOR_INITIALISATION = 246
    MODE_BOOTING = 247
    MODE_BOOTLOADER = 249
    MODE_VIOLATION = 251
    MODE_FAULT = 252
    MODE_RUNNING = 253
    MODE_IDLE = 255


class SafetyMode(IntEnum):
    UNKNOWN = -2
    NORMAL = 1
    REDUCED = 2
    PROTECTIVE_STOP = 3
    RECOVERY = 4
    SAFEGUARD_STOP = 5
    SYSTEM_EMERGENCY_STOP = 6
    ROBOT_EMERGENCY_STOP = 7
    VIOLATION = 8
    FAULT = 9
    VALIDATE_JOINT_ID = 10
    UNDEFINED_SAFETY_MODE = 11
    AUTOMATIC_MODE_SAFEGUARD_STOP = 12
    SYSTEM_THREE_POSITION_ENABLING_STOP = 13
    TP_THREE_POSITION_ENABLING_STOP = 14


class ToolMode(IntEnum):
    MODE_RESET = 235
    MODE_SHUTTING_DOWN = 236
    MODE_POWER_OFF = 239
    MODE_NOT_RESPONDING = 245
    MODE_BOOTING = 247
    MODE_BOOTLOADER = 249
    MODE_FAULT = 252
    MODE_RUNNING = 253
    MODE_IDLE = 255


class ToolDigitalMode(IntEnum):
    SINGLE_NEEDLE = 0
    DOUBLE_NEEDLE_1 = 1
    DOUBLE_NEEDLE_2 = 2
    TRIPLE_NEEDLE = 3


class ToolDigitalOutputMode(IntEnum):
    PUSH_PULL_MODE = 0
    SOURCING_PNP_MODE = 1
    SINKING_NPN_MODE = 2


class TaskStatus(IntEnum):
    UNKNOWN = 0
    PLAYING = 1
    PAUSED = 2
    STOPPED = 3


class TrajectoryMotionResult(IntEnum):
    SUCCESS = 0
    CANCELED = 1
    FAILURE = 2


class TrajectoryControlAction(IntEnum):
    CANCEL = -1
    NOOP = 0
    START = 1


class ToolVoltage(IntEnum):
    OFF = 0
    V_12 = 12
    V_24 = 24


class ForceMode(IntEnum):
    FIX = 0
    POINT = 1
    MOTION = 2
    TCP = 3


class FreedriveAction(IntEnum):
    FREEDRIVE_END = -1
    FREEDRIVE_NOOP = 0
    FREEDRIVE_START = 1


class ControlMode(IntEnum):
    MODE_STOPPED = -2
    MODE_UNINITIALIZED = -1
    MODE_IDLE = 0
    MODE_SERVOJ = 1
    MODE_SPEEDJ = 2
    MODE_TRAJECTORY = 3
    MODE_SPEEDL = 4
    MODE_POSE = 5
    MODE_FREEDRIVE = 6
    MODE_TOOL_IN_CONTACT = 7
    MODE_SERVOJ_QUEUE = 8
    MODE_POSE_QUEUE = 9


class RtsiType(Enum):
    """RTSI variable types; each value is the big-endian struct format."""

    BOOL = "?"
    UINT8 = "B"
    UINT16 = "H"
    UINT32 = "I"
    UINT64 = "Q"
    INT32 = "i"
    DOUBLE = "d"
    VECTOR3D = "3d"
    VECTOR6D = "6d"
    VECTOR6INT32 = "6i"
    VECTOR6UINT32 = "6I"

    @classmethod
    def from_name(cls, name: str) -> RtsiType:
        """Return the type named ``name`` as the controller spells it."""
        try:
            return cls.__members__[name]
        except KeyError:
            raise EliteError(
                ErrorCode.RTSI_UNKNOWN_VARIABLE_TYPE, f"error type: {name}"
            ) from None

    @property
    def fmt(self) -> str:
        return self.value

    @property
    def size(self) -> int:
        """Number of bytes the type takes on the wire."""
        return struct.calcsize(">" + self.value)

    def default(self) -> Any:
        """A fresh zero value of this type."""
        if self is RtsiType.BOOL:
            return False
        if self is RtsiType.DOUBLE:
            return 0.0
        if self is RtsiType.VECTOR3D:
            return [0.0] * 3
        if self is RtsiType.VECTOR6D:
            return [0.0] * 6
        if self in (RtsiType.VECTOR6INT32, RtsiType.VECTOR6UINT32):
            return [0] * 6
        return 0