"""Monitoring backend client interface and the log-only implementation."""

from .base import (
    Credentials,
    InitListener,
    KeyPairCredentials,
    SecretCredentials,
    ServerInfo,
    SetupListener,
    StatsBackend,
)
from .logging_backend import LoggingBackend

__all__ = [
    "Credentials",
    "InitListener",
    "KeyPairCredentials",
    "LoggingBackend",
    "SecretCredentials",
    "ServerInfo",
    "SetupListener",
    "StatsBackend",
]
