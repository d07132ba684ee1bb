[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "capx-api"
version = "0.1.0"
description = "Typed models and version conversion for the Nutanix Cluster API infrastructure resources."
requires-python = ">=3.10"
keywords = ["kubernetes", "cluster-api", "nutanix", "crd", "infrastructure"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
    "Typing :: Typed",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["capx_api"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
