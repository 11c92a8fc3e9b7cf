[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "elite-rtsi"
version = "1.2.0"
description = "Client for the RTSI real-time data interface of Elite CS series robot controllers"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "rtsi", "robot", "real-time", "protocol", "industrial"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["elite_rtsi"]

[tool.hatch.build.targets.sdist]
include = ["elite_rtsi", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
