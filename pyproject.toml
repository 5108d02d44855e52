[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "funcie"
version = "0.1.0"
description = "Supporting pieces for routing serverless function invocations to a developer's machine: deployment commands, CLI tool wrappers, AWS resource listing, bastion configuration and Docker host translation."
requires-python = ">=3.10"
dependencies = []
keywords = ["serverless", "lambda", "tunnel", "bastion", "terraform", "ssm", "development"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["funcie"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
