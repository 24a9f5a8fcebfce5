[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fieldcontrol"
version = "0.1.0"
description = "Field management logic for robotics competitions: scheduling, awards, cards, alliance selection, match lists and field PLC I/O."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "robotics",
    "competition",
    "field management",
    "tournament",
    "scheduling",
    "modbus",
    "plc",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fieldcontrol"]

[tool.pytest.ini_options]
addopts = "-ra"
