[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cdc_ingest"
version = "0.1.0"
description = "Building blocks for reading, publishing, consuming and indexing change-data-capture events into OpenSearch"
requires-python = ">=3.10"
keywords = ["cdc", "change-data-capture", "kafka", "opensearch", "ingestion", "indexing"]
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
    "Topic :: Database",
    "Typing :: Typed",
]
dependencies = [
    "pyyaml",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["cdc_ingest"]

[tool.pytest.ini_options]
addopts = "-ra"
