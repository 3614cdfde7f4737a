[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gplus"
version = "0.1.0"
description = "Model introspection helpers for ORM query builders: column naming, tag parsing, column maps and optimistic-lock version fields for dataclass models."
requires-python = ">=3.10"
dependencies = []
keywords = ["orm", "database", "schema", "column", "snake-case", "dataclass", "optimistic-lock"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gplus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
