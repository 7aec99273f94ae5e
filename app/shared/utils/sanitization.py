"""Input sanitization for task text and attachment file names.

Task text is rendered by every connected client, so markup is stripped
before it reaches the board.
"""

import html
import re
import unicodedata
from typing import ClassVar

import nh3


class InputSanitizer:
    """Sanitize user-supplied board text and file names."""

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    FILENAME_UNSAFE: ClassVar[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9._-]+")
    FILENAME_MAX_LENGTH: ClassVar[int] = 120

    @classmethod
    def sanitize_text(cls, value: str) -> str:
        """Remove all HTML tags with nh3 and trim surrounding whitespace.

        nh3 escapes the text it keeps; that is undone, since task text
        travels as JSON and is stored as plain text.

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Plain text without markup.
        """
        if not value:
            return value
        return html.unescape(nh3.clean(value, tags=cls.ALLOWED_TAGS)).strip()

    @classmethod
    def sanitize_filename(cls, value: str) -> str:
        """Reduce an uploaded file name to a safe single path segment.

        Strips directory components, normalizes unicode to ASCII, replaces
        anything outside [A-Za-z0-9._-] with '_' and caps the length.
        Returns 'file' when nothing usable is left.
        """
        name = value.replace("\\", "/").rsplit("/", 1)[-1]
        name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode()
        name = cls.FILENAME_UNSAFE.sub("_", name).strip("._")
        if not name:
            return "file"
        return name[-cls.FILENAME_MAX_LENGTH:]


def sanitize_text(value: str) -> str:
    """Strip markup from task text (title, description)."""
    return InputSanitizer.sanitize_text(value)


def sanitize_filename(value: str) -> str:
    """Return a storage-safe file name segment."""
    return InputSanitizer.sanitize_filename(value)
