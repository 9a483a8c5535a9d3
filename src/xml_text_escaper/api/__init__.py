"""Public API for XML text escaping.

Module-level functions for escaping strings, streams, and files, and for locating
characters that XML cannot carry.
"""

from .escape import (
    IllegalCharacterReport,
    escape_file,
    escape_stream,
    escape_text,
    escape_text_strict,
    find_illegal_characters,
)

__all__ = [
    "IllegalCharacterReport",
    "escape_file",
    "escape_stream",
    "escape_text",
    "escape_text_strict",
    "find_illegal_characters",
]
