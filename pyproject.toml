[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mtrprobe"
version = "0.1.0"
description = "Traceroute-style hop statistics (mtr) and ping over raw ICMP sockets"
requires-python = ">=3.10"
dependencies = []
keywords = ["mtr", "ping", "traceroute", "icmp", "network", "latency", "qqwry"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mtrprobe = "mtrprobe.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mtrprobe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
