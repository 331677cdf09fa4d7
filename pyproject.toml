[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lineagekit"
version = "0.1.0"
description = "Helpers for schema lineage tooling: Go identifier naming, OpenAPI reference handling, lacunas and txtar golden-file testing"
requires-python = ">=3.10"
keywords = ["codegen", "openapi", "txtar", "golden-files", "schema", "lineage"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Testing",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lineagekit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
