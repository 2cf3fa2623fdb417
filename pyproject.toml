[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oracompat"
version = "0.1.0"
description = "Oracle-style helpers: business-day calendars, typed message pipes, directory access rules, REMAINDER and NVARCHAR2 length checks"
requires-python = ">=3.10"
dependencies = []
keywords = ["oracle", "compatibility", "dbms_pipe", "plvdate", "business days", "remainder", "nvarchar2"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oracompat"]

[tool.pytest.ini_options]
addopts = "-ra"
