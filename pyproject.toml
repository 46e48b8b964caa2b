[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gekkotools"
version = "0.1.0"
description = "GameCube Gekko CPU register definitions and a .dol executable parser"
requires-python = ">=3.10"
dependencies = []
keywords = ["gamecube", "gekko", "powerpc", "dol", "registers"]
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
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
dolinfo = "gekkotools.dolinfo:main"

[tool.hatch.build.targets.wheel]
packages = ["gekkotools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
