[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysdes"
version = "0.1.0"
description = "In-memory system-design building blocks: an expense-splitting ledger, a URL shortener and a tiny HTTP greeting server."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "system-design",
    "expense-splitting",
    "ledger",
    "url-shortener",
    "analytics",
    "http-server",
]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sysdes-server = "sysdes.server:main"

[tool.hatch.build.targets.wheel]
packages = ["sysdes"]

[tool.hatch.build.targets.sdist]
include = ["sysdes", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
