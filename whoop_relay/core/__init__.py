"""Core configuration and infrastructure helpers."""

from .config import ConfigurationError, Settings, get_settings
from .database import Datastore, DatastoreError
from .system import system_info
from .time import elapsed_ms, epoch_ms, iso_timestamp, utcnow

__all__ = [
    "ConfigurationError",
    "Datastore",
    "DatastoreError",
    "Settings",
    "elapsed_ms",
    "epoch_ms",
    "get_settings",
    "iso_timestamp",
    "system_info",
    "utcnow",
]
