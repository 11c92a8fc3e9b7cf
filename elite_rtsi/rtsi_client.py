"""Client for the RTSI real-time data exchange protocol of the controller."""

from __future__ import annotations

import inspect
import select
import socket
import time
from collections.abc import Callable, Iterable, Sequence
from enum import Enum, IntEnum

from elite_rtsi.log import LogLevel, log
from elite_rtsi.recipe import RtsiRecipe
from elite_rtsi.utils import EliteError, ErrorCode, pack, unpack
from elite_rtsi.version import VersionInfo

HEADER_SIZE = 3
DEFAULT_PORT = 30004
DEFAULT_PROTOCOL_VERSION = 1
DEFAULT_TIMEOUT_MS = 1000

_RESULT_INDEX = 3
_PEEK_LIMIT = 65536


class PackageType(IntEnum):
    """Message types of the RTSI protocol (third byte of every header)."""

    REQUEST_PROTOCOL_VERSION = 86
    GET_ELITE_CONTROL_VERSION = 118
    TEXT_MESSAGE = 77
    DATA_PACKAGE = 85
    CONTROL_PACKAGE_SETUP_OUTPUTS = 79
    CONTROL_PACKAGE_SETUP_INPUTS = 73
    CONTROL_PACKAGE_START = 83
    CONTROL_PACKAGE_PAUSE = 80


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    STARTED = "started"
    STOPPED = "stopped"


def _log(level: LogLevel, fmt: str, *args: object) -> None:
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    line = caller.f_lineno if caller is not None else 0
    log("elite_rtsi/rtsi_client.py", line, level, fmt, *args)


class RtsiClient:
    """A blocking RTSI client over one TCP connection."""

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        self.timeout_ms = timeout_ms
        self._sock: socket.socket | None = None
        self.state = ConnectionState.DISCONNECTED

    def __enter__(self) -> RtsiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- connection -----------------------------------------------------

    def connect(self, ip: str, port: int = DEFAULT_PORT) -> None:
        """Connect to the RTSI server at ``ip``:``port``."""
        self._socket_disconnect()
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 0)
            if hasattr(socket, "TCP_QUICKACK"):
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_QUICKACK, 1)
            if hasattr(socket, "SO_PRIORITY"):
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_PRIORITY, 6)
            sock.connect((ip, port))
        except OSError as exc:
            sock.close()
            self.state = ConnectionState.DISCONNECTED
            _log(LogLevel.ERROR, "Connect to RTSI server %s:%d fail: %s", ip, port, exc)
            raise EliteError(ErrorCode.SOCKET_CONNECT_FAIL, str(exc)) from exc
        self._sock = sock
        self.state = ConnectionState.CONNECTED

    def disconnect(self) -> None:
        self._socket_disconnect()

    def close(self) -> None:
        """Close the connection; same as :meth:`disconnect`."""
        self._socket_disconnect()

    def is_connected(self) -> bool:
        return self.state is not ConnectionState.DISCONNECTED

    def is_started(self) -> bool:
        return self.state is ConnectionState.STARTED

    def is_read_available(self) -> bool:
        """True if received bytes are waiting to be read."""
        return self._available() > 0

    # -- protocol requests ----------------------------------------------

    def negotiate_protocol_version(self, version: int = DEFAULT_PROTOCOL_VERSION) -> bool:
        """Ask the controller to use protocol ``version``; True if accepted."""
        self._send_all(PackageType.REQUEST_PROTOCOL_VERSION, pack("H", version))
        accepted = False

        def parse(package: bytes) -> None:
            nonlocal accepted
            accepted = package[_RESULT_INDEX] != 0

        self._receive(PackageType.REQUEST_PROTOCOL_VERSION, parse)
        return accepted

    def get_controller_version(self) -> VersionInfo:
        """Version of the controller software (all zero if no reply)."""
        self._send_all(PackageType.GET_ELITE_CONTROL_VERSION)
        version = VersionInfo()

        def parse(package: bytes) -> None:
            nonlocal version
            fields, _ = unpack("4I", package, HEADER_SIZE)
            version = VersionInfo(*fields)

        self._receive(PackageType.GET_ELITE_CONTROL_VERSION, parse)
        return version

    def setup_output_recipe(self, recipe_list: Sequence[str], frequency: float) -> RtsiRecipe:
        """Subscribe to the variables in ``recipe_list`` at ``frequency`` Hz."""
        names = list(recipe_list)
        payload = pack("d", frequency) + ",".join(names).encode("ascii")
        self._send_all(PackageType.CONTROL_PACKAGE_SETUP_OUTPUTS, payload)
        recipe = RtsiRecipe(names)
        self._receive(PackageType.CONTROL_PACKAGE_SETUP_OUTPUTS, recipe.parse_type_package)
        return recipe

    def setup_input_recipe(self, recipe_list: Sequence[str]) -> RtsiRecipe:
        """Register the variables in ``recipe_list`` as inputs to the controller."""
        names = list(recipe_list)
        payload = ",".join(names).encode("ascii")
        self._send_all(PackageType.CONTROL_PACKAGE_SETUP_INPUTS, payload)
        recipe = RtsiRecipe(names)
        self._receive(PackageType.CONTROL_PACKAGE_SETUP_INPUTS, recipe.parse_type_package)
        return recipe

    def start(self) -> bool:
        """Start data synchronisation; True if the controller agreed."""
        self._send_all(PackageType.CONTROL_PACKAGE_START)
        started = False

        def parse(package: bytes) -> None:
            nonlocal started
            started = package[_RESULT_INDEX] != 0
            if started:
                self.state = ConnectionState.STARTED

        self._receive(PackageType.CONTROL_PACKAGE_START, parse)
        return started

    def pause(self) -> bool:
        """Pause data synchronisation; True if the controller agreed."""
        self._send_all(PackageType.CONTROL_PACKAGE_PAUSE)
        paused = False

        def parse(package: bytes) -> None:
            nonlocal paused
            paused = package[_RESULT_INDEX] != 0
            if paused:
                self.state = ConnectionState.STOPPED

        self._receive(PackageType.CONTROL_PACKAGE_PAUSE, parse)
        return paused

    def send(self, recipe: RtsiRecipe) -> None:
        """Send the current values of an input recipe."""
        self._send_all(PackageType.DATA_PACKAGE, recipe.pack_to_bytes())

    def receive_data(self, recipes: Iterable[RtsiRecipe | None], read_newest: bool = False) -> int:
        """Receive a data message into whichever recipe it belongs to.

        Returns the recipe id that was updated, or -1 if none was.
        """
        candidates = list(recipes)
        result_id = -1

        def parse(package: bytes) -> None:
            nonlocal result_id
            recipe_id = package[_RESULT_INDEX]
            for recipe in candidates:
                if recipe is None:
                    break
                if recipe.id == recipe_id:
                    recipe.parse_data_package(package)
                    result_id = recipe_id
                    break

        self._receive(PackageType.DATA_PACKAGE, parse, read_newest)
        return result_id

    def receive_recipe(self, recipe: RtsiRecipe, read_newest: bool = False) -> bool:
        """Receive a data message into ``recipe``; True if it was updated."""
        updated = False

        def parse(package: bytes) -> None:
            nonlocal updated
            if recipe.id == package[_RESULT_INDEX]:
                recipe.parse_data_package(package)
                updated = True

        self._receive(PackageType.DATA_PACKAGE, parse, read_newest)
        return updated

    # -- transport -------------------------------------------------------

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise EliteError(ErrorCode.SOCKET_FAIL, "not connected")
        return self._sock

    def _send_all(self, cmd: PackageType, payload: bytes = b"") -> None:
        length = HEADER_SIZE + len(payload)
        if length > 0xFFFF:
            raise ValueError(f"RTSI message too long: {length} bytes")
        message = pack("H", length) + bytes([cmd]) + payload
        sock = self._require_socket()
        try:
            sock.sendall(message)
        except OSError as exc:
            _log(LogLevel.FATAL, "RTSI socket send fail: %s", exc)
            raise EliteError(ErrorCode.SOCKET_FAIL, str(exc)) from exc

    def _socket_disconnect(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
        self._sock = None
        self.state = ConnectionState.DISCONNECTED

    def _receive_socket(self, size: int) -> bytes | None:
        """Read exactly ``size`` bytes; None (and disconnect) on timeout."""
        sock = self._require_socket()
        deadline = time.monotonic() + self.timeout_ms / 1000.0
        chunks: list[bytes] = []
        remaining = size
        while remaining > 0:
            left = deadline - time.monotonic()
            if left <= 0:
                self._socket_disconnect()
                return None
            sock.settimeout(left)
            try:
                data = sock.recv(remaining)
            except socket.timeout:
                self._socket_disconnect()
                return None
            except OSError as exc:
                _log(LogLevel.FATAL, "RTSI socket receive fail: %s", exc)
                raise EliteError(ErrorCode.SOCKET_FAIL, str(exc)) from exc
            if not data:
                _log(LogLevel.FATAL, "RTSI socket receive fail: %s", "connection closed by peer")
                raise EliteError(ErrorCode.SOCKET_FAIL, "connection closed by peer")
            chunks.append(data)
            remaining -= len(data)
        return b"".join(chunks)

    def _available(self) -> int:
        sock = self._sock
        if sock is None:
            return 0
        try:
            readable, _, _ = select.select([sock], [], [], 0)
            if not readable:
                return 0
            return len(sock.recv(_PEEK_LIMIT, socket.MSG_PEEK))
        except (OSError, ValueError):
            return 0

    def _receive(
        self,
        target: PackageType,
        parser: Callable[[bytes], None],
        read_newest: bool = False,
    ) -> None:
        """Read messages until one of type ``target`` has been parsed.

        Messages of other types are skipped. With ``read_newest`` the loop
        keeps parsing while complete headers are already waiting.
        """
        while True:
            header = self._receive_socket(HEADER_SIZE)
            if header is None:
                return
            length, _ = unpack("H", header, 0)
            package_type = header[2]
            body_size = length - HEADER_SIZE
            if body_size <= 0:
                return
            body = self._receive_socket(body_size)
            if body is None:
                return
            if package_type == target:
                parser(header + body)
                if not read_newest:
                    return
                if self._available() >= HEADER_SIZE:
                    continue
                return