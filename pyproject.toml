[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "latticezk"
version = "0.1.0"
description = "Lattice-based BGV encryption and BDLOP commitments over cyclotomic polynomial rings"
requires-python = ">=3.10"
keywords = ["lattice", "cryptography", "bgv", "bdlop", "commitment", "ntt", "homomorphic"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["latticezk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
