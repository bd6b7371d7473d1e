[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "elfinctl"
version = "0.2.0"
description = "Parameter model, patch files, presets and MIDI CC output for the Elfin 04 polysynth"
requires-python = ">=3.10"
dependencies = []
keywords = ["midi", "synthesizer", "controller", "sysex", "presets", "elfin"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
elfinctl = "elfinctl.controller:main"

[tool.hatch.build.targets.wheel]
packages = ["elfinctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
