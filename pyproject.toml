[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "otlpmapping"
version = "0.1.0"
description = "Map OpenTelemetry resource attributes, logs and metric dimensions to Datadog conventions and report host metadata"
requires-python = ">=3.10"
keywords = ["opentelemetry", "otlp", "datadog", "monitoring", "host metadata", "logs", "metrics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
otlpmapping-licenses = "otlpmapping.license_file:main"

[tool.hatch.build.targets.wheel]
packages = ["otlpmapping"]

[tool.pytest.ini_options]
addopts = "-ra"
