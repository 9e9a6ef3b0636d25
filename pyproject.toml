[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gamenet"
version = "0.1.0"
description = "Small networking toolkit for games: TCP and UDP servers and clients, a relay peer table, peer lists, ping/pong, reconnects and a tiny JSON helper."
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "game", "tcp", "udp", "relay", "sockets"]
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
    "Topic :: System :: Networking",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gamenet = "gamenet.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gamenet"]

[tool.hatch.build.targets.sdist]
include = ["gamenet", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
