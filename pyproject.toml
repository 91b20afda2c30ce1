[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bossfight"
version = "0.1.0"
description = "A small side-scrolling boss-fight game: fight two bosses and a summoned archer across two levels."
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game", "platformer", "boss", "pygame", "arcade"]
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
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
bossfight = "bossfight.app:main"

[tool.hatch.build.targets.wheel]
packages = ["bossfight"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
