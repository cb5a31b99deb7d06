[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tmlink"
version = "0.1.0"
description = "Serial telemetry framing and a serial-to-MQTT bridge node"
requires-python = ">=3.10"
keywords = ["telemetry", "mqtt", "serial", "uart", "bridge", "robotics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Communications",
]
dependencies = [
    "paho-mqtt>=2.0",
    "pyserial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tmlink-node = "tmlink.node:main"

[tool.hatch.build.targets.wheel]
packages = ["tmlink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
