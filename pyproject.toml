[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sprite_animator"
version = "2.1.0"
description = "Frame-based spritesheet animation: composed clips, easing, time-driven playback and events"
requires-python = ">=3.10"
dependencies = []
keywords = ["sprite", "spritesheet", "animation", "game", "atlas", "easing"]
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
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sprite_animator"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
