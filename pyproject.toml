[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "focst"
version = "0.1.3"
description = "Subtitle loading, cleanup, timing correction and output helpers for translation workflows"
requires-python = ">=3.10"
keywords = ["subtitles", "srt", "webvtt", "ass", "ttml", "timing", "punctuation"]
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
    "Topic :: Multimedia :: Video",
    "Topic :: Text Processing :: Linguistic",
]
dependencies = [
    "regex",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["focst"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
