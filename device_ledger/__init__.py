"""Device registry and energy telemetry ledger."""

__version__ = "0.1.0"
