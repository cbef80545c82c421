[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cozeflow"
version = "0.1.0"
description = "Client library for running and streaming workflows, reading run histories, duplicating templates and looking up the current user over the Coze HTTP API"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["coze", "workflow", "api-client", "streaming", "sse"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cozeflow"]

[tool.hatch.build.targets.sdist]
include = ["cozeflow", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
