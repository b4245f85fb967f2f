"""Utility modules for FTML.

Provides:
- text: escaping, entity decoding, whitespace and visible-width helpers
- logger: get_logger for logging
"""

from ftml.utils.logger import get_logger
from ftml.utils.text import (
    collapse_whitespace,
    decode_entities,
    escape_attribute,
    escape_text,
    strip_ansi,
    visible_len,
)

__all__ = [
    "collapse_whitespace",
    "decode_entities",
    "escape_attribute",
    "escape_text",
    "get_logger",
    "strip_ansi",
    "visible_len",
]
