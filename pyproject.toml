[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bootcore"
version = "0.1.0"
description = "Boot-loader core logic: text parsing, GUIDs, GPT/MBR partition tables, resource URIs, message formatting and wallpaper layout"
requires-python = ">=3.10"
dependencies = []
keywords = ["bootloader", "gpt", "mbr", "partition", "guid", "uri", "mersenne-twister"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Boot",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bootcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
