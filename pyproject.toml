[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linkshort"
version = "0.1.0"
description = "A small URL shortener service backed by SQLite, with expiring links, click counting and a cleanup job."
requires-python = ">=3.10"
keywords = ["url-shortener", "short-links", "flask", "redirect", "sqlite", "web-service"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "flask",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
linkshort-api = "linkshort.server:main"
linkshort-cronjobs = "linkshort.cronjobs:main"

[tool.hatch.build.targets.wheel]
packages = ["linkshort"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
