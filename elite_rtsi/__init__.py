"""Client for the RTSI real-time data interface of Elite CS series robot controllers."""

__version__ = "1.2.0"

__all__ = [
    "datatypes",
    "log",
    "recipe",
    "robot_exception",
    "rtsi_client",
    "rtsi_io",
    "utils",
    "version",
]