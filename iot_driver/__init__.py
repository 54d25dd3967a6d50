"""HTTP driver exposing a simulated IoT device."""

__version__ = "0.1.0"
