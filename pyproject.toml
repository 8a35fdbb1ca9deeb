[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "framecast"
version = "0.1.0"
description = "Send a PNG screen image over UDP as raw BGRx packets and reassemble it into a PPM image on the receiving side"
requires-python = ">=3.10"
keywords = ["screenshot", "udp", "image", "ppm", "bgrx", "streaming"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Capture :: Screen Capture",
    "Topic :: System :: Networking",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
framecast-send = "framecast.sender:main"
framecast-server = "framecast.server:main"

[tool.hatch.build.targets.wheel]
packages = ["framecast"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
