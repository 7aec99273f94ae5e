"""Shared utilities: logging, datetime, ids and sanitization.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    generate_cuid,
    sanitize_filename,
    sanitize_text,
    to_iso,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "sanitize_filename",
    "sanitize_text",
    "to_iso",
    "utc_now",
]
