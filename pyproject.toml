[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "masterpiece"
version = "0.1.0"
description = "A falling-block colour-matching puzzle game with a pygame front end"
requires-python = ">=3.10"
keywords = ["game", "puzzle", "falling blocks", "match three", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: MacOS X",
    "Environment :: Win32 (MS Windows)",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
masterpiece = "masterpiece.app:main"
masterpiece-copyfiles = "masterpiece.copyfiles:main"

[tool.hatch.build.targets.wheel]
packages = ["masterpiece"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
