[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "craftlink"
version = "1.0.0"
description = "Packet-based TCP file upload and messaging client and server"
requires-python = ">=3.10"
keywords = ["tcp", "file-transfer", "packets", "client", "server", "telemetry"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: File Sharing",
]
dependencies = [
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
craftlink-client = "craftlink.client:main"
craftlink-server = "craftlink.server:main"

[tool.hatch.build.targets.wheel]
packages = ["craftlink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
