[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cobolcopy"
version = "0.1.0"
description = "COBOL copybook inlining, name extraction helpers and parse-error diagnostics for legacy code analysis"
requires-python = ">=3.10"
dependencies = []
keywords = ["cobol", "copybook", "preprocessor", "legacy", "static-analysis"]
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
    "Topic :: Software Development :: Pre-processors",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cobolcopy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
