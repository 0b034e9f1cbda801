[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "serpentcli"
version = "0.1.0"
description = "Building blocks for command-line applications: a flag parser, a command tree, stream handling and help templates."
requires-python = ">=3.10"
keywords = ["cli", "command-line", "flags", "parser", "commands", "templates"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Utilities",
]
dependencies = [
    "jinja2",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["serpentcli"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
