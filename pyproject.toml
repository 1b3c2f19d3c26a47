[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitbuilder"
version = "0.1.0"
description = "Building blocks for a git push-to-deploy builder: push handling, build type detection, storage keys and cleanup"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["git", "builder", "buildpack", "dockerfile", "procfile", "paas", "slug"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Version Control :: Git",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gitbuilder"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
