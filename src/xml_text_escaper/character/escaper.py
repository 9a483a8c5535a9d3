"""Streaming XML text escaper.

The escaper wraps a pull-based code-unit source and is itself one. Each time its
lookahead buffer runs dry it pulls from the source until it can decide on at least
one output unit:

1. The five markup characters become their predefined entity references.
2. Code units legal under the XML 1.1 character rule pass through unchanged.
3. A surrogate pair passes through, whether it arrives as a high surrogate
   immediately followed by a low one or as a single supplementary character.
4. Anything else is illegal and is either dropped or reported, depending on
   ``filter_illegal``. Illegal characters cannot be written as character
   references either (XML 1.1, "Legal Character" constraint), nor inside CDATA.
"""

import logging
from collections import deque
from typing import Any, Deque, Iterator, Optional

from xml_text_escaper.shared.config import DEFAULT_CHUNK_SIZE
from xml_text_escaper.shared.logging import get_logger
from xml_text_escaper.shared.result import EscapeStatistics

from .classification import (
    code_unit_length,
    describe_illegal_code_unit,
    is_high_surrogate,
    is_legal_code_unit,
    is_low_surrogate,
    is_supplementary,
)
from .entities import XML_ENTITIES
from .sources import CodeUnitSource, open_source


class EscapeError(Exception):
    """Base exception for escaping errors."""


class IllegalCharacterError(EscapeError, ValueError):
    """Raised in fail-fast mode when the input holds a character XML cannot carry.

    Attributes:
        code_unit: Numeric value of the offending UTF-16 code unit
        position: Index of that unit in the source, counted in code units
    """

    def __init__(self, code_unit: int, position: Optional[int] = None) -> None:
        message = f"Illegal character: '{code_unit:X}'"
        if position is not None:
            message += f" at position {position}"
        super().__init__(message)
        self.code_unit = code_unit
        self.position = position


def _release(obj: Any) -> None:
    close = getattr(obj, "close", None)
    if callable(close):
        close()


class XmlTextEscaper:
    """Pull-based source of code units that are safe inside XML text content.

    The escaper owns ``source`` and closes it exactly once, either through
    ``close()`` or by leaving a ``with`` block, whichever comes first.

    Examples:
        >>> with XmlTextEscaper("<foo />") as escaper:
        ...     escaper.read_to_end()
        '&lt;foo /&gt;'

        Fail-fast mode:
        >>> escaper = XmlTextEscaper("\\x0b", filter_illegal=False)
        >>> escaper.read()
        Traceback (most recent call last):
        ...
        xml_text_escaper.character.escaper.IllegalCharacterError: Illegal character: 'B' at position 0
    """

    def __init__(
        self,
        source: Any,
        filter_illegal: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the escaper.

        Args:
            source: Text, a readable text stream, or a CodeUnitSource
            filter_illegal: Drop illegal characters silently if True, raise
                IllegalCharacterError if False
            chunk_size: Characters per read when ``source`` is a stream
            correlation_id: Optional correlation ID for log records

        Raises:
            TypeError: If the arguments have unsupported types. ``source`` is
                closed before the error propagates.
        """
        self._closed = False
        self._buffer: Deque[str] = deque()
        self.statistics = EscapeStatistics()
        self.logger = get_logger(__name__, correlation_id, "xml_text_escaper")
        try:
            if not isinstance(filter_illegal, bool):
                raise TypeError("filter_illegal must be a boolean")
            self._source: CodeUnitSource = open_source(source, chunk_size)
        except Exception:
            self._closed = True
            _release(source)
            raise
        self._filter_illegal = filter_illegal

    @property
    def filter_illegal(self) -> bool:
        return self._filter_illegal

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def buffered(self) -> int:
        """Number of decided output units waiting in the lookahead buffer."""
        return len(self._buffer)

    def peek(self) -> Optional[str]:
        """Return the next output code unit without consuming it, or None at the end."""
        self._check_open()
        self._populate_buffer()
        if not self._buffer:
            return None
        return self._buffer[0]

    def read(self) -> Optional[str]:
        """Return and consume the next output code unit, or None at the end."""
        self._check_open()
        self._populate_buffer()
        if not self._buffer:
            return None
        unit = self._buffer.popleft()
        self.statistics.units_written += code_unit_length(unit)
        return unit

    def read_chars(self, count: int) -> str:
        """Read up to ``count`` output units; an empty string means the end.

        A supplementary character counts as one unit.
        """
        self._check_open()
        if count < 0:
            raise ValueError("count must be >= 0")
        units = []
        while len(units) < count:
            unit = self.read()
            if unit is None:
                break
            units.append(unit)
        return "".join(units)

    def read_to_end(self) -> str:
        """Drain the escaper and return everything that remains."""
        return "".join(iter(self.read, None))

    def close(self) -> None:
        """Release the owned source. Further calls do nothing."""
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        try:
            self._source.close()
        finally:
            self.logger.debug(
                "Escaper closed",
                extra={"statistics": self.statistics.to_dict()}
            )

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed escaper")

    def _populate_buffer(self) -> None:
        """Pull from the source until an output unit is decided or the source ends."""
        source = self._source
        stats = self.statistics
        while not self._buffer:
            unit = source.read()
            if unit is None:
                return
            position = stats.units_read
            stats.units_read += 1

            entity = XML_ENTITIES.get(unit)
            if entity is not None:
                self._buffer.extend(entity)
                stats.entities_substituted += 1
                continue

            code = ord(unit)
            if is_legal_code_unit(code):
                self._buffer.append(unit)
                continue

            if is_supplementary(code):
                self._buffer.append(unit)
                stats.units_read += 1
                stats.surrogate_pairs += 1
                continue

            if is_high_surrogate(code):
                following = source.peek()
                if following is not None and is_low_surrogate(ord(following)):
                    self._buffer.append(unit)
                    self._buffer.append(source.read())
                    stats.units_read += 1
                    stats.surrogate_pairs += 1
                    continue

            if not self._filter_illegal:
                self.logger.warning(
                    "Illegal character rejected",
                    extra={
                        "code_unit": code,
                        "position": position,
                        "reason": describe_illegal_code_unit(code),
                    }
                )
                raise IllegalCharacterError(code, position)

            stats.illegal_dropped += 1
            if self.logger.is_enabled_for(logging.DEBUG):
                self.logger.debug(
                    "Illegal character dropped",
                    extra={
                        "code_unit": code,
                        "position": position,
                        "reason": describe_illegal_code_unit(code),
                    }
                )

    def __iter__(self) -> Iterator[str]:
        return iter(self.read, None)

    def __enter__(self) -> "XmlTextEscaper":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def new_escaper(source: Any, filter_illegal: bool = True) -> XmlTextEscaper:
    """Create an escaper that owns ``source``."""
    return XmlTextEscaper(source, filter_illegal=filter_illegal)
