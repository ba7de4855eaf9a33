"""Packet-based TCP client and server for file uploads, messages, info and telemetry requests."""

__version__ = "1.0.0"