[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lzstream"
version = "0.1.0"
description = "Pure-Python encoder and decoder for classic LZMA files and LZMA2 chunk sequences"
requires-python = ">=3.10"
keywords = ["lzma", "lzma2", "compression", "decompression", "range coder"]
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
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lzstream"]

[tool.pytest.ini_options]
addopts = "-ra"
