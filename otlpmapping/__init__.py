"""Map OpenTelemetry attributes, logs and metric dimensions to Datadog conventions, and report host metadata."""

__version__ = "0.1.0"