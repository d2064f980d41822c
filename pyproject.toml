[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emberkit"
version = "0.1.0"
description = "Small game-engine toolkit: rectangle packing, text editing, OBJ file checks and CPU particle simulation"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "particles", "rectangle-packing", "text-editing", "obj", "skyline", "undo"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["emberkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
