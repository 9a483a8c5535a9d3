"""Predefined XML entity references.

The five characters below are significant to XML markup and are replaced by their
predefined entity references (XML 1.1, section 4.6) wherever they appear in text.
"""

from types import MappingProxyType
from typing import Mapping, Optional

XML_ENTITIES: Mapping[str, str] = MappingProxyType({
    '"': "&quot;",
    "&": "&amp;",
    "'": "&apos;",
    "<": "&lt;",
    ">": "&gt;",
})

MAX_ENTITY_LENGTH = max(len(replacement) for replacement in XML_ENTITIES.values())


def lookup_entity(unit: str) -> Optional[str]:
    """Return the entity reference for ``unit``, or None if it needs none."""
    return XML_ENTITIES.get(unit)
