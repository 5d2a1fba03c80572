[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zappyd"
version = "0.1.0"
description = "Game server for Zappy, a networked team survival and elevation simulation"
requires-python = ">=3.10"
dependencies = []
keywords = ["zappy", "game server", "simulation", "multiplayer", "tcp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
zappy_server = "zappyd.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["zappyd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
