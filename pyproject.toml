[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gapicgen"
version = "0.1.0"
description = "Generate command-line front ends and client code fragments from protocol buffer service descriptions."
requires-python = ">=3.10"
keywords = ["protobuf", "grpc", "code generation", "cli", "gapic"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "jinja2",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gapicgen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
