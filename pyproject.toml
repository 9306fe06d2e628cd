[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qcsearch"
version = "0.1.0"
description = "Exact search for the maximum gamma-quasi-clique of an undirected graph"
requires-python = ">=3.10"
keywords = ["graph", "quasi-clique", "branch-and-bound", "dense subgraph", "degeneracy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
qcsearch = "qcsearch.cli:main"
qcsearch-tobin = "qcsearch.converter:main"

[tool.hatch.build.targets.wheel]
packages = ["qcsearch"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
