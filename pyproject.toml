[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dfine-detect"
version = "0.1.0"
description = "Image preparation and detection decoding for D-FINE style object detectors on the COCO label set"
requires-python = ">=3.10"
keywords = ["object-detection", "d-fine", "coco", "letterbox", "computer-vision"]
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
    "Topic :: Scientific/Engineering :: Image Recognition",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dfine_detect"]

[tool.pytest.ini_options]
addopts = "-ra"
