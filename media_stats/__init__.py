"""Periodic media quality reporting to an external monitoring backend."""

__version__ = "1.0.0"
