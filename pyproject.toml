[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bvarlite"
version = "0.1.0"
description = "Lightweight in-process metric variables: reducers, recorders, status values, windows and time series."
requires-python = ">=3.10"
dependencies = []
keywords = ["metrics", "monitoring", "counters", "statistics", "time-series"]
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
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bvarlite = "bvarlite.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bvarlite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
