# elite-rtsi

A pure-Python client for the RTSI (real-time synchronisation interface) of
Elite CS series robot controllers. It negotiates the protocol version, sets
up input and output recipes, and runs a background thread that keeps the
output recipe up to date and sends your input values to the controller.

The package uses only the Python standard library and needs Python 3.10 or
newer.

## Installation

```
pip install elite-rtsi
```

## Reading and writing robot data

`elite_rtsi.rtsi_io.RtsiIOInterface` takes a list of output variable names,
a list of input variable names and the output frequency in Hz:

```python
from elite_rtsi.rtsi_io import RtsiIOInterface

outputs = ["timestamp", "actual_joint_positions", "robot_mode"]
inputs = ["speed_slider_mask", "speed_slider_fraction"]

io = RtsiIOInterface(outputs, inputs, 250.0)
if io.connect("192.168.1.10"):
    print(io.get_controller_version().to_string())
    print(io.get_timestamp())
    print(io.get_actual_joint_positions())
    print(io.get_robot_mode())
    io.set_speed_scaling(0.5)
    io.disconnect()
```

The port (default 30004) and the read timeout in milliseconds (default 1000)
can be given as the keyword arguments `port` and `timeout_ms`.

`connect()` returns `True` once the first data package has arrived. A
recipe variable of a type the controller does not know makes it log the
problem, disconnect and return `False`.

The `get_*` methods return the value last received for their variable, or a
zero value if the variable is not in either recipe. Mode and status getters
(`get_robot_mode`, `get_safety_status`, `get_joint_mode`, `get_tool_mode`,
`get_runtime_state`, `get_tool_digital_mode`, `get_tool_digital_output_mode`)
return members of the enums in `elite_rtsi.datatypes`, or the raw integer
for a value the enum does not list.

The `set_*` methods write into the input recipe; the background thread sends
it after the next received package. They return `False` if a variable they
need is missing from the input recipe or the value does not fit its type,
and `True` when there is no input recipe at all.

Recipes can also be read from text files holding one variable name per
line:

```python
io = RtsiIOInterface.from_files("output_recipe.txt", "input_recipe.txt", 250.0)
```

`elite_rtsi.rtsi_io.read_recipe(path)` reads such a file on its own; an
empty path gives an empty list, and a missing or empty file raises
`EliteError` with `ErrorCode.FILE_OPEN_FAIL`.

## The low-level client

`elite_rtsi.rtsi_client.RtsiClient` speaks the protocol directly and can be
used as a context manager:

```python
from elite_rtsi.rtsi_client import RtsiClient

with RtsiClient() as client:
    client.connect("192.168.1.10", 30004)
    client.negotiate_protocol_version(1)
    recipe = client.setup_output_recipe(["timestamp", "actual_TCP_pose"], 125.0)
    client.start()
    if client.receive_recipe(recipe, False):
        print(recipe.get_value("actual_TCP_pose"))
```

`receive_data(recipes, read_newest)` fills whichever of several recipes a
data package belongs to and returns its id, or -1. `pause()` stops the data
stream, `send(recipe)` sends an input recipe, and `is_connected()`,
`is_started()` and `is_read_available()` report the connection state. A read
that times out closes the connection.

Recipes are `elite_rtsi.recipe.RtsiRecipe` objects. Values are read with
`get_value(name)` and written with `set_value(name, value)`; both raise
`KeyError` for a name not in the recipe. `pack_to_bytes()` encodes an input
recipe. Variable types are the members of `elite_rtsi.datatypes.RtsiType`.

## Other modules

- `elite_rtsi.utils`: `pack` and `unpack` for big-endian values,
  `split_string`, and the `EliteError` / `ErrorCode` error type.
- `elite_rtsi.version`: `VersionInfo`, an ordered four-part version with
  `from_string` and `to_string`, and `SDK_VERSION_INFO`.
- `elite_rtsi.datatypes`: robot, joint, safety and tool mode enums, control
  enums and `RtsiType`.
- `elite_rtsi.robot_exception`: records describing robot errors and script
  runtime exceptions (`RobotError`, `RobotRuntimeException`).

## Logging

Log output goes through a replaceable handler:

```python
from elite_rtsi.log import LogHandler, LogLevel, register_log_handler, set_log_level

class ErrorsOnly(LogHandler):
    def log(self, file, line, level, message):
        if level >= LogLevel.ERROR:
            print(message)

register_log_handler(ErrorsOnly())
set_log_level(LogLevel.WARN)
```

The levels are `DEBUG`, `INFO` (the default minimum), `WARN`, `ERROR`,
`FATAL` and `NONE`. `unregister_log_handler()` restores the default handler,
which prints `[LEVEL] file:line: message` to standard output.

## Errors

Connection, socket and recipe failures raise `elite_rtsi.utils.EliteError`,
whose `code` attribute is an `ErrorCode` member.

## What this package does not do

It covers the RTSI data interface only. It does not command robot motion,
send or serve robot scripts, talk to the dashboard or primary ports, or
upgrade controller software. The records in `elite_rtsi.robot_exception` are
plain data classes; nothing in the package receives or produces them.

## Running the tests

```
pip install -e .[test]
pytest
```