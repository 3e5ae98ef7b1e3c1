[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cpufeat"
version = "0.1.0"
description = "Detect CPU features from /proc/cpuinfo, the ELF auxiliary vector and sysfs CPU lists"
requires-python = ">=3.10"
dependencies = []
keywords = ["cpu", "features", "hwcaps", "cpuinfo", "aarch64", "auxv", "android"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cpufeat-ndk = "cpufeat.ndk_compat:main"

[tool.hatch.build.targets.wheel]
packages = ["cpufeat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
