"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import to_iso, utc_now
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import (
    InputSanitizer,
    sanitize_filename,
    sanitize_text,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "to_iso",
    "InputSanitizer",
    "sanitize_filename",
    "sanitize_text",
]
