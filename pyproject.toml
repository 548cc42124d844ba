[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "midimap"
version = "0.1.0"
description = "Inbound and outbound MIDI controller mappings driven by dictionary or TOML configuration"
requires-python = ">=3.11"
keywords = ["midi", "controller", "mapping", "dataref", "encoder", "slider"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["midimap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
