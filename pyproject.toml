[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "segmentation_fit"
version = "1.0.0"
description = "Gym class booking library: lesson calendar, subscriber accounts and monthly attendance reports"
requires-python = ">=3.10"
dependencies = []
keywords = ["gym", "booking", "scheduling", "fitness", "subscriptions"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Italian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["segmentation_fit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
