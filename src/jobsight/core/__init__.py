"""Core infrastructure: configuration, logging, clock."""

from jobsight.core.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from jobsight.core.config import (
    DEFAULT_OWNER_METADATA_KEY,
    CausalitySettings,
    JobsightSettings,
    LoggingSettings,
    RenderingSettings,
    StorageSettings,
    load_settings,
)
from jobsight.core.logging import configure_logging, get_logger

__all__ = [
    "DEFAULT_CLOCK",
    "DEFAULT_OWNER_METADATA_KEY",
    "CausalitySettings",
    "Clock",
    "JobsightSettings",
    "LoggingSettings",
    "MockClock",
    "RenderingSettings",
    "StorageSettings",
    "SystemClock",
    "configure_logging",
    "get_logger",
    "load_settings",
]
