"""Logging configuration, correlation IDs and HTTP middleware."""

from askmynotes.observability.correlation import (
    get_correlation_id,
    set_correlation_id,
)
from askmynotes.observability.logger import configure_logging

__all__ = ["configure_logging", "get_correlation_id", "set_correlation_id"]
