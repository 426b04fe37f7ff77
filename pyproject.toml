[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tftest"
version = "0.1.0"
description = "A framework and command-line tool for testing Terraform modules and their examples"
requires-python = ">=3.10"
dependencies = []
keywords = ["terraform", "testing", "infrastructure", "idempotency", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tftest = "tftest.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tftest"]

[tool.pytest.ini_options]
addopts = "-ra"
