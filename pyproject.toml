[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dojokit"
version = "0.1.0"
description = "Cairo felt serialization, model schemas, tag naming and layout unpacking for Dojo worlds"
requires-python = ">=3.10"
dependencies = []
keywords = ["dojo", "cairo", "starknet", "felt", "serialization", "schema"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dojokit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
