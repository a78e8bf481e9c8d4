[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensordecode"
version = "0.1.0"
description = "Decoders for LoRaWAN sensor uplink payloads: air quality, level, temperature, water meters and more."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "lorawan",
    "iot",
    "sensor",
    "payload",
    "decoder",
    "water-meter",
    "telemetry",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
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
packages = ["sensordecode"]

[tool.hatch.build.targets.sdist]
include = ["sensordecode", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
