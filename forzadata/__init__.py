"""Forza Data Out telemetry decoder: schema-driven UDP decoding with console, CSV, JSON and HTTP sinks."""

__version__ = "0.3.0"
