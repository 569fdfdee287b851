[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "openingexplorer"
version = "0.1.0"
description = "Storage model and query logic for a chess opening explorer: compact binary entries, merge rules and LMDB-backed tables."
requires-python = ">=3.10"
keywords = ["chess", "openings", "explorer", "database", "lmdb"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Games/Entertainment :: Board Games",
]
dependencies = [
    "lmdb",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["openingexplorer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
