"""Shared telemetry: logging setup and module loggers."""

from app.shared.telemetry.logging import get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
]
