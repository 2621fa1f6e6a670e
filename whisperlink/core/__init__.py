"""Core: settings, logging, errors, telemetry."""
