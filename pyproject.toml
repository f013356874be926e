[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lokipsr"
version = "0.0.1"
description = "Building blocks for pulsar searching: threshold-scheme simulation, suggestion buffers, statistics and numeric utilities"
requires-python = ">=3.10"
keywords = ["pulsar", "astronomy", "search", "threshold", "pruning", "statistics"]
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
    "Topic :: Scientific/Engineering :: Astronomy",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lokipsr"]

[tool.pytest.ini_options]
addopts = "-ra"
