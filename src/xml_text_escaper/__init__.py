"""XML Text Escaper.

A streaming encoder that turns arbitrary UTF-16 text into text that can be embedded
verbatim in XML content: markup characters become entity references, characters
XML 1.1 does not allow are dropped or reported, and surrogate pairs are preserved.

Progressive API Disclosure:
- Level 1: Simple functions - escape_text(), escape_file(), escape_stream()
- Level 2: Streaming escaper - XmlTextEscaper class
- Level 3: Custom sources - CodeUnitSource protocol
"""

__version__ = "0.1.0"
__author__ = "XML Text Escaper Team"

# Level 1: Simple functions
from .api import (
    escape_file,
    escape_stream,
    escape_text,
    escape_text_strict,
    find_illegal_characters,
)

# Level 2 and 3: Streaming escaper and sources
from .character import (
    CodeUnitSource,
    EscapeError,
    IllegalCharacterError,
    StringSource,
    TextStreamSource,
    XmlTextEscaper,
    new_escaper,
)

# Configuration and results
from .shared import EscapeResult, EscapeStatistics, EscaperConfig

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "escape_text",
    "escape_text_strict",
    "escape_stream",
    "escape_file",
    "find_illegal_characters",

    # Level 2: Streaming escaper
    "XmlTextEscaper",
    "new_escaper",
    "EscapeError",
    "IllegalCharacterError",

    # Level 3: Sources
    "CodeUnitSource",
    "StringSource",
    "TextStreamSource",

    # Configuration and results
    "EscaperConfig",
    "EscapeResult",
    "EscapeStatistics",
]
