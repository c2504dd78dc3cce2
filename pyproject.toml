[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quantdesk"
version = "0.1.0"
description = "Building blocks for a quantitative trading desk: contract symbols, instrument parsing, a simulated broker with LMDB storage, daily return statistics, quote replay, signals and UTF conversions."
requires-python = ">=3.10"
dependencies = [
    "lmdb",
    "cbor2",
]
keywords = ["trading", "finance", "futures", "options", "stocks", "backtesting", "quotes"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["quantdesk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
