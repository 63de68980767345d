[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "retrokit"
version = "0.1.0"
description = "Game data helpers: case-insensitive file lookup, bitmap-font text menus, settings and user save data"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "engine", "save-data", "font", "settings", "ini"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["retrokit"]

[tool.pytest.ini_options]
addopts = "-ra"
