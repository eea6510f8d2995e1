[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "changie"
version = "0.1.0"
description = "Manage Keep a Changelog files and Semantic Versioning releases with git tags"
requires-python = ">=3.11"
dependencies = [
    "pyyaml",
]
keywords = ["changelog", "keep-a-changelog", "semver", "git", "release"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
changie = "changie.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["changie"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
