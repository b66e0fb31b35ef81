[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aionland"
version = "1.0.0"
description = "Userland toolkit: package manager, code assistant, personal assistant, build engine, compositor model and text terminal"
requires-python = ">=3.10"
dependencies = []
keywords = ["package-manager", "code-analysis", "assistant", "ci", "compositor", "terminal"]
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
    "Topic :: Software Development",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["aionland"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
