[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "virtprov"
version = "0.1.0"
description = "Node device details, ignition files, domain flags and wait_for_ip plan handling for libvirt-managed virtual machines"
requires-python = ">=3.10"
dependencies = []
keywords = ["libvirt", "virtualization", "domain", "ignition", "node-devices"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["virtprov"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
