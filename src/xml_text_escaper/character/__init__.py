"""Character layer for XML text escaping.

This module provides the entity table, the XML 1.1 legal-character classifier,
pull-based code-unit sources, and the streaming escaper built on them.
"""

from .classification import (
    code_unit_length,
    describe_illegal_code_unit,
    is_high_surrogate,
    is_legal_code_unit,
    is_low_surrogate,
    is_supplementary,
    is_surrogate_pair,
)
from .entities import MAX_ENTITY_LENGTH, XML_ENTITIES, lookup_entity
from .escaper import (
    EscapeError,
    IllegalCharacterError,
    XmlTextEscaper,
    new_escaper,
)
from .sources import (
    CodeUnitSource,
    StringSource,
    TextStreamSource,
    open_source,
)

__all__ = [
    # Classification
    "code_unit_length",
    "describe_illegal_code_unit",
    "is_high_surrogate",
    "is_legal_code_unit",
    "is_low_surrogate",
    "is_supplementary",
    "is_surrogate_pair",
    # Entities
    "MAX_ENTITY_LENGTH",
    "XML_ENTITIES",
    "lookup_entity",
    # Escaper
    "EscapeError",
    "IllegalCharacterError",
    "XmlTextEscaper",
    "new_escaper",
    # Sources
    "CodeUnitSource",
    "StringSource",
    "TextStreamSource",
    "open_source",
]
