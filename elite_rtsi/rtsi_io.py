"""High-level RTSI interface: keeps recipes in sync with the controller."""

from __future__ import annotations

import inspect
import threading
import time
from collections.abc import Iterable
from concurrent.futures import Future
from enum import IntEnum
from pathlib import Path
from typing import Any, TypeVar

from elite_rtsi.datatypes import (
    JointMode,
    RobotMode,
    SafetyMode,
    TaskStatus,
    ToolDigitalMode,
    ToolDigitalOutputMode,
    ToolMode,
)
from elite_rtsi.log import LogLevel, log
from elite_rtsi.recipe import RtsiRecipe
from elite_rtsi.rtsi_client import DEFAULT_PORT, DEFAULT_TIMEOUT_MS, RtsiClient
from elite_rtsi.utils import EliteError, ErrorCode
from elite_rtsi.version import VersionInfo

_E = TypeVar("_E", bound=IntEnum)


def _log(level: LogLevel, fmt: str, *args: object) -> None:
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    line = caller.f_lineno if caller is not None else 0
    log("elite_rtsi/rtsi_io.py", line, level, fmt, *args)


def _as_enum(enum_cls: type[_E], value: int) -> _E | int:
    """Member of ``enum_cls`` for ``value``, or the raw value if it has none."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def read_recipe(recipe_file: str | Path) -> list[str]:
    """Read a recipe file, one variable name per line.

    An empty path gives an empty recipe. A file that cannot be opened or is
    empty raises :class:`EliteError` with ``FILE_OPEN_FAIL``.
    """
    if not str(recipe_file):
        return []
    try:
        with open(recipe_file, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise EliteError(
            ErrorCode.FILE_OPEN_FAIL,
            f"Opening file '{recipe_file}' failed with error: {exc.strerror or exc}",
        ) from exc
    if not text:
        raise EliteError(
            ErrorCode.FILE_OPEN_FAIL, f"The recipe '{recipe_file}' file is empty exiting "
        )
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class RtsiIOInterface(RtsiClient):
    """Connects, sets up recipes and keeps them synchronised in a background thread."""

    def __init__(
        self,
        output_recipe: Iterable[str],
        input_recipe: Iterable[str],
        frequency: float,
        *,
        port: int = DEFAULT_PORT,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        super().__init__(timeout_ms)
        self.output_recipe_names: list[str] = list(output_recipe)
        self.input_recipe_names: list[str] = list(input_recipe)
        self.frequency = frequency
        self.port = port
        self.output_recipe: RtsiRecipe | None = None
        self.input_recipe: RtsiRecipe | None = None
        self._controller_version = VersionInfo()
        self._recv_thread: threading.Thread | None = None
        self._alive = threading.Event()
        self._input_new_cmd = threading.Event()

    @classmethod
    def from_files(
        cls, output_recipe_file: str | Path, input_recipe_file: str | Path, frequency: float
    ) -> RtsiIOInterface:
        """Build an interface from two recipe files."""
        return cls(read_recipe(output_recipe_file), read_recipe(input_recipe_file), frequency)

    # -- connection -----------------------------------------------------

    def connect(self, ip: str) -> bool:  # type: ignore[override]
        """Connect, set up recipes, start syncing; True once data is flowing."""
        if self.is_connected() or self._recv_thread is not None:
            self.disconnect()

        super().connect(ip, self.port)

        if not self.negotiate_protocol_version():
            _log(LogLevel.FATAL, "RTSI negotiate protocol version fail.")
            return False

        self._controller_version = super().get_controller_version()

        try:
            self._setup_recipe()
            if not self.start():
                _log(LogLevel.FATAL, "RTSI start signal send fail.")
                return False
        except EliteError as exc:
            if exc.code is ErrorCode.RTSI_UNKNOWN_VARIABLE_TYPE:
                _log(LogLevel.FATAL, "RTSI setup recipe fail: %s. Check recipe files.", exc)
                self.disconnect()
                return False
            raise

        ready: Future[bool] = Future()

        def run() -> None:
            # Receive one package first so values are valid once connect returns.
            try:
                if self.output_recipe is not None and not self.receive_recipe(
                    self.output_recipe, False
                ):
                    ready.set_result(False)
                    return
            except Exception as exc:  # noqa: BLE001 - reported to the caller
                _log(LogLevel.FATAL, "RTSI init receive data fail: %s", exc)
                ready.set_result(False)
                return
            ready.set_result(True)
            self._recv_loop()

        self._alive.set()
        self._recv_thread = threading.Thread(target=run, name="rtsi-io-recv", daemon=True)
        self._recv_thread.start()

        ok = ready.result()
        if not ok:
            _log(LogLevel.FATAL, "RTSI recv thread start fail.")
            self.disconnect()
        return ok

    def disconnect(self) -> None:
        """Stop the background thread and close the connection."""
        thread = self._recv_thread
        self._alive.clear()
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._recv_thread = None
        super().disconnect()

    def close(self) -> None:
        self.disconnect()

    def is_connected(self) -> bool:
        return self._alive.is_set() and super().is_connected()

    def is_started(self) -> bool:
        return self._alive.is_set() and super().is_started()

    def get_controller_version(self) -> VersionInfo:
        """Controller version read during :meth:`connect`."""
        return self._controller_version

    # -- internals -------------------------------------------------------

    def _setup_recipe(self) -> None:
        if self.input_recipe_names:
            self.input_recipe = self.setup_input_recipe(self.input_recipe_names)
        if self.output_recipe_names:
            self.output_recipe = self.setup_output_recipe(self.output_recipe_names, self.frequency)

    def _recv_loop(self) -> None:
        period_s = 1.0 / self.frequency
        _log(LogLevel.INFO, "RTSI IO interface sync thread start, period %fms", period_s * 1000)
        while self._alive.is_set():
            try:
                if self.output_recipe is not None:
                    self.receive_recipe(self.output_recipe, False)
                else:
                    time.sleep(period_s)
                if self._input_new_cmd.is_set() and self.input_recipe is not None:
                    self._input_new_cmd.clear()
                    self.send(self.input_recipe)
            except Exception as exc:  # noqa: BLE001 - the thread must end quietly
                _log(LogLevel.FATAL, "RTSI receive data fail: %s", exc)
                self._alive.clear()
        self._alive.clear()
        _log(LogLevel.INFO, "RTSI IO interface sync thread dropped")

    def _get_recipe_value(self, name: str, default: Any) -> Any:
        for recipe in (self.output_recipe, self.input_recipe):
            if recipe is None:
                continue
            try:
                return recipe.get_value(name)
            except KeyError:
                continue
        return default

    def _set_input_value(self, name: str, value: Any) -> bool:
        recipe = self.input_recipe
        if recipe is None:
            return False
        try:
            recipe.set_value(name, value)
        except (KeyError, ValueError):
            return False
        self._input_new_cmd.set()
        return True

    def _set_all(self, *items: tuple[str, Any]) -> bool:
        if self.input_recipe is None:
            return True
        return all(self._set_input_value(name, value) for name, value in items)

    def _set_analog_output(self, index: int, output_type: int, level: float) -> bool:
        if self.input_recipe is None:
            return True
        if not self._set_input_value("standard_analog_output_type", output_type):
            return False
        if index == 0:
            return self._set_all(
                ("standard_analog_output_mask", 1), ("standard_analog_output_0", level)
            )
        if index == 1:
            return self._set_all(
                ("standard_analog_output_mask", 2), ("standard_analog_output_1", level)
            )
        return self._set_input_value("standard_analog_output_mask", 0)

    # -- inputs ----------------------------------------------------------

    def set_speed_scaling(self, slider: float) -> bool:
        return self._set_all(("speed_slider_mask", 1), ("speed_slider_fraction", slider))

    def set_standard_digital(self, index: int, level: bool) -> bool:
        return self._set_all(
            ("standard_digital_output_mask", (1 << index) & 0xFFFF),
            ("standard_digital_output", (int(bool(level)) << index) & 0xFFFF),
        )

    def set_configure_digital(self, index: int, level: bool) -> bool:
        return self._set_all(
            ("configurable_digital_output_mask", (1 << index) & 0xFF),
            ("configurable_digital_output", (int(bool(level)) << index) & 0xFF),
        )

    def set_analog_output_voltage(self, index: int, value: float) -> bool:
        """Set a standard analog output, in volts (0 to 10 V)."""
        return self._set_analog_output(index, 3, value / 10.0)

    def set_analog_output_current(self, index: int, value: float) -> bool:
        """Set a standard analog output, in amperes (4 to 20 mA)."""
        return self._set_analog_output(index, 0, (value - 0.004) / (0.02 - 0.004))

    def set_external_force_torque(self, value: Iterable[float]) -> bool:
        return self._set_all(("external_force_torque", list(value)))

    def set_tool_digital_output(self, index: int, level: bool) -> bool:
        return self._set_all(
            ("tool_digital_output_mask", (1 << index) & 0xFF),
            ("tool_digital_output", (int(bool(level)) << index) & 0xFF),
        )

    # -- outputs ---------------------------------------------------------

    def get_timestamp(self) -> float:
        return self._get_recipe_value("timestamp", 0.0)

    def get_payload_mass(self) -> float:
        return self._get_recipe_value("payload_mass", 0.0)

    def get_payload_cog(self) -> list[float]:
        return self._get_recipe_value("payload_cog", [0.0] * 3)

    def get_script_control_line(self) -> int:
        return self._get_recipe_value("script_control_line", 0)

    def get_target_joint_positions(self) -> list[float]:
        return self._get_recipe_value("target_joint_positions", [0.0] * 6)

    def get_target_joint_velocity(self) -> list[float]:
        return self._get_recipe_value("target_joint_speeds", [0.0] * 6)

    def get_actual_joint_positions(self) -> list[float]:
        return self._get_recipe_value("actual_joint_positions", [0.0] * 6)

    def get_actual_joint_torques(self) -> list[float]:
        return self._get_recipe_value("actual_joint_torques", [0.0] * 6)

    def get_actual_joint_velocity(self) -> list[float]:
        return self._get_recipe_value("actual_joint_speeds", [0.0] * 6)

    def get_actual_joint_current(self) -> list[float]:
        return self._get_recipe_value("actual_joint_current", [0.0] * 6)

    def get_actual_joint_temperatures(self) -> list[float]:
        return self._get_recipe_value("joint_temperatures", [0.0] * 6)

    def get_actual_tcp_pose(self) -> list[float]:
        return self._get_recipe_value("actual_TCP_pose", [0.0] * 6)

    def get_actual_tcp_velocity(self) -> list[float]:
        return self._get_recipe_value("actual_TCP_speed", [0.0] * 6)

    def get_actual_tcp_force(self) -> list[float]:
        return self._get_recipe_value("actual_TCP_force", [0.0] * 6)

    def get_target_tcp_pose(self) -> list[float]:
        return self._get_recipe_value("target_TCP_pose", [0.0] * 6)

    def get_target_tcp_velocity(self) -> list[float]:
        return self._get_recipe_value("target_TCP_speed", [0.0] * 6)

    def get_digital_input_bits(self) -> int:
        return self._get_recipe_value("actual_digital_input_bits", 0)

    def get_digital_output_bits(self) -> int:
        return self._get_recipe_value("actual_digital_output_bits", 0)

    def get_robot_mode(self) -> RobotMode | int:
        return _as_enum(RobotMode, self._get_recipe_value("robot_mode", 0))

    def get_joint_mode(self) -> list[JointMode | int]:
        return [_as_enum(JointMode, mode) for mode in self._get_recipe_value("joint_mode", [0] * 6)]

    def get_safety_status(self) -> SafetyMode | int:
        return _as_enum(SafetyMode, self._get_recipe_value("safety_status", 0))

    def get_actual_speed_scaling(self) -> float:
        return self._get_recipe_value("speed_scaling", 0.0)

    def get_target_speed_scaling(self) -> float:
        return self._get_recipe_value("target_speed_fraction", 0.0)

    def get_robot_voltage(self) -> float:
        return self._get_recipe_value("actual_robot_voltage", 0.0)

    def get_robot_current(self) -> float:
        return self._get_recipe_value("actual_robot_current", 0.0)

    def get_runtime_state(self) -> TaskStatus | int:
        return _as_enum(TaskStatus, self._get_recipe_value("runtime_state", 0))

    def get_elbow_position(self) -> list[float]:
        return self._get_recipe_value("elbow_position", [0.0] * 3)

    def get_elbow_velocity(self) -> list[float]:
        return self._get_recipe_value("elbow_velocity", [0.0] * 3)

    def get_robot_status(self) -> int:
        return self._get_recipe_value("robot_status_bits", 0)

    def get_safety_status_bits(self) -> int:
        return self._get_recipe_value("safety_status_bits", 0)

    def get_analog_io_types(self) -> int:
        return self._get_recipe_value("analog_io_types", 0)

    def get_analog_input(self, index: int) -> float:
        name = "standard_analog_input0" if index == 0 else "standard_analog_input1"
        return self._get_recipe_value(name, 0.0)

    def get_analog_output(self, index: int) -> float:
        name = "standard_analog_output0" if index == 0 else "standard_analog_output1"
        return self._get_recipe_value(name, 0.0)

    def get_io_current(self) -> float:
        return self._get_recipe_value("io_current", 0.0)

    def get_tool_mode(self) -> ToolMode | int:
        return _as_enum(ToolMode, self._get_recipe_value("tool_mode", 0))

    def get_tool_analog_input_type(self) -> int:
        return self._get_recipe_value("tool_analog_input_types", 0)

    def get_tool_analog_output_type(self) -> int:
        return self._get_recipe_value("tool_analog_output_types", 0)

    def get_tool_analog_input(self) -> float:
        return self._get_recipe_value("tool_analog_input", 0.0)

    def get_tool_analog_output(self) -> float:
        return self._get_recipe_value("tool_analog_output", 0.0)

    def get_tool_output_voltage(self) -> float:
        return self._get_recipe_value("tool_output_voltage", 0.0)

    def get_tool_output_current(self) -> float:
        return self._get_recipe_value("tool_output_current", 0.0)

    def get_tool_output_temperature(self) -> float:
        return self._get_recipe_value("tool_temperature", 0.0)

    def get_tool_digital_mode(self) -> ToolDigitalMode | int:
        return _as_enum(ToolDigitalMode, self._get_recipe_value("tool_digital_mode", 0))

    def get_tool_digital_output_mode(self, index: int) -> ToolDigitalOutputMode | int:
        if index not in (0, 1, 2, 3):
            return ToolDigitalOutputMode.PUSH_PULL_MODE
        value = self._get_recipe_value(f"tool_digital{index}_mode", 0)
        return _as_enum(ToolDigitalOutputMode, value)

    def get_out_bool_registers_0_to_31(self) -> int:
        return self._get_recipe_value("output_bit_registers0_to_31", 0)

    def get_out_bool_registers_32_to_63(self) -> int:
        return self._get_recipe_value("output_bit_registers32_to_63", 0)

    def get_in_bool_registers_0_to_31(self) -> int:
        return self._get_recipe_value("input_bit_registers0_to_31", 0)

    def get_in_bool_registers_32_to_63(self) -> int:
        return self._get_recipe_value("input_bit_registers32_to_63", 0)

    def get_in_bool_register(self, index: int) -> bool:
        return bool(self._get_recipe_value(f"input_bit_register{index}", False))

    def get_out_bool_register(self, index: int) -> bool:
        return bool(self._get_recipe_value(f"output_bit_register{index}", False))

    def get_in_int_register(self, index: int) -> int:
        return self._get_recipe_value(f"input_int_register{index}", 0)

    def get_out_int_register(self, index: int) -> int:
        return self._get_recipe_value(f"output_int_register{index}", 0)

    def get_in_double_register(self, index: int) -> float:
        return self._get_recipe_value(f"input_double_register{index}", 0.0)

    def get_out_double_register(self, index: int) -> float:
        return self._get_recipe_value(f"output_double_register{index}", 0.0)