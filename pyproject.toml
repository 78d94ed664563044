[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "memspool"
version = "0.1.0"
description = "A simulated page-based memory pool with first-fit and best-fit placement, a slab allocator, a benchmark and a threaded demo"
requires-python = ">=3.10"
dependencies = []
keywords = ["memory", "allocator", "slab", "first-fit", "best-fit", "fragmentation", "benchmark"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
memspool-benchmark = "memspool.benchmark:main"
memspool-demo = "memspool.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["memspool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 110
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
