[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nexrad"
version = "0.0.3"
description = "Download and decode functions for NEXRAD radar data."
requires-python = ">=3.10"
dependencies = [
    "requests>=2.28",
]
keywords = ["nexrad", "radar", "weather", "wsr-88d", "level-ii", "meteorology"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Atmospheric Science",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
]

[project.scripts]
nexrad-decode = "nexrad.cli:main"
nexrad-download = "nexrad.download_cli:main"
nexrad-render = "nexrad.render:main"

[tool.hatch.build.targets.wheel]
packages = ["nexrad"]

[tool.hatch.build.targets.sdist]
include = ["nexrad", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
