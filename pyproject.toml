[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eostui"
version = "0.1.0"
description = "Building blocks for a terminal console to EOS storage clusters: running commands locally or over SSH, filtering and sorting cluster tables, editing IO shaping policies, cleaning log output"
requires-python = ">=3.10"
dependencies = []
keywords = ["eos", "storage", "ssh", "cluster", "administration", "terminal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["eostui"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
