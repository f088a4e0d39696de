[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "roguesave"
version = "0.1.0"
description = "Readers and writers for dungeon-crawler save games, score files and DES crypt(3) password hashes"
requires-python = ">=3.10"
dependencies = []
keywords = ["roguelike", "save game", "scoreboard", "des", "crypt"]
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
    "Topic :: Games/Entertainment :: Role-Playing",
    "Topic :: File Formats",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["roguesave"]

[tool.pytest.ini_options]
addopts = "-ra"
