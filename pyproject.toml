[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mpecdsa"
version = "0.8.1"
description = "Two-party ECDSA over secp256k1 with Paillier-based MtA and zero-knowledge proofs"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ecdsa",
    "two-party",
    "threshold-signatures",
    "secp256k1",
    "paillier",
    "zero-knowledge",
    "mta",
    "cryptography",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mpecdsa"]

[tool.hatch.build.targets.sdist]
include = ["mpecdsa", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
