[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simpleos"
version = "0.1.0"
description = "Small operating-systems toolkit: a parallel-for helper, an ELF header inspector, a priority round-robin scheduler with a submit shell, and an interactive command shell"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-systems",
    "shell",
    "scheduler",
    "round-robin",
    "elf",
    "threads",
    "parallel-for",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: System :: Shells",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
simpleos-vector = "simpleos.vector:main"
simpleos-matrix = "simpleos.matrix:main"
simpleos-sched-shell = "simpleos.sched_shell:main"
simpleos-shell = "simpleos.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["simpleos"]

[tool.pytest.ini_options]
addopts = "-ra"
