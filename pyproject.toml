[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "basnet"
version = "0.1.0"
description = "Thread-backed service pools, pooled synchronous client handlers and a small static-file HTTP reply toolkit"
requires-python = ">=3.10"
dependencies = []
keywords = ["thread pool", "handler pool", "round robin", "http", "static files"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["basnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
