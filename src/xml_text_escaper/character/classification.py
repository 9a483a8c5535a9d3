"""XML 1.1 legal-character classification for UTF-16 code units.

The classifier works on single 16-bit code units. Values above 0xD7FF are never
legal on their own: a supplementary-plane character is only accepted as a
well-formed surrogate pair, either written out as two units or handed over as
one code point above 0xFFFF, which stands for its pair.
"""

from typing import List, Optional, Tuple

# XML 1.1 restricted and discouraged ranges over the BMP
ILLEGAL_RANGES: List[Tuple[int, int]] = [
    (0x0001, 0x0008),
    (0x000B, 0x000C),
    (0x000E, 0x001F),
    (0x007F, 0x0084),
    (0x0086, 0x009F),
]

MAX_LEGAL_BMP = 0xD7FF

HIGH_SURROGATE_START = 0xD800
HIGH_SURROGATE_END = 0xDBFF
LOW_SURROGATE_START = 0xDC00
LOW_SURROGATE_END = 0xDFFF

MAX_CODE_UNIT = 0xFFFF
SUPPLEMENTARY_PLANE_START = 0x10000


def is_legal_code_unit(code: int) -> bool:
    """Check if a single code unit may appear literally in XML 1.1 text.

    Args:
        code: 16-bit code unit value

    Returns:
        True if the unit is legal without being part of a surrogate pair
    """
    if code > MAX_LEGAL_BMP:
        return False
    for start, end in ILLEGAL_RANGES:
        if start <= code <= end:
            return False
    return True


def is_high_surrogate(code: int) -> bool:
    """Check if code unit is a UTF-16 high (leading) surrogate."""
    return HIGH_SURROGATE_START <= code <= HIGH_SURROGATE_END


def is_low_surrogate(code: int) -> bool:
    """Check if code unit is a UTF-16 low (trailing) surrogate."""
    return LOW_SURROGATE_START <= code <= LOW_SURROGATE_END


def is_surrogate_pair(high: int, low: int) -> bool:
    """Check if two consecutive code units form a well-formed surrogate pair."""
    return is_high_surrogate(high) and is_low_surrogate(low)


def is_supplementary(code: int) -> bool:
    """Check if a value is a code point above the BMP, i.e. a pair in one unit."""
    return code >= SUPPLEMENTARY_PLANE_START


def code_unit_length(unit: str) -> int:
    """Number of UTF-16 code units ``unit`` stands for (2 for a supplementary character)."""
    return 2 if is_supplementary(ord(unit)) else 1


def describe_illegal_code_unit(code: int) -> Optional[str]:
    """Explain why a code unit is illegal on its own.

    Args:
        code: 16-bit code unit value

    Returns:
        Human-readable reason, or None if the unit is legal
    """
    if is_legal_code_unit(code) or is_supplementary(code):
        return None
    if is_high_surrogate(code):
        return f"Unpaired high surrogate: U+{code:04X}"
    if is_low_surrogate(code):
        return f"Unpaired low surrogate: U+{code:04X}"
    if code <= 0x9F:
        return f"Control character: U+{code:04X}"
    return f"Character outside the legal range: U+{code:04X}"
