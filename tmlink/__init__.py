"""Telemetry framing, a ring-buffered sender, and a serial-to-MQTT relay node."""

__version__ = "0.1.0"
__all__ = ["__version__"]