[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "harbol"
version = "0.1.0"
description = "Data structures, memory allocator models and a config-file parser"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "allocator",
    "memory pool",
    "object pool",
    "region",
    "byte buffer",
    "dynamic array",
    "config",
    "parser",
]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["harbol"]

[tool.hatch.build.targets.sdist]
include = ["harbol", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
