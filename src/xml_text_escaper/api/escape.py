"""Whole-text and whole-file escaping API.

This module provides module-level helpers built on XmlTextEscaper, from a one-call
string transform to chunked escaping of streams and files.
"""

import time
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, List, Optional, TextIO, Union

from xml_text_escaper.character.classification import (
    describe_illegal_code_unit,
    is_high_surrogate,
    is_legal_code_unit,
    is_low_surrogate,
    is_supplementary,
)
from xml_text_escaper.character.entities import XML_ENTITIES
from xml_text_escaper.character.escaper import XmlTextEscaper
from xml_text_escaper.character.sources import open_source
from xml_text_escaper.shared.config import DEFAULT_CHUNK_SIZE, EscaperConfig
from xml_text_escaper.shared.logging import get_logger
from xml_text_escaper.shared.result import EscapeResult

MS_PER_SECOND = 1000


@dataclass
class IllegalCharacterReport:
    """One illegal code unit found by find_illegal_characters.

    Attributes:
        position: Index of the unit in the input, counted in UTF-16 code units
        code_unit: Numeric value of the unit
        reason: Human-readable explanation
    """

    position: int
    code_unit: int
    reason: str

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "code_unit": f"U+{self.code_unit:04X}",
            "reason": self.reason,
        }


def escape_text(text: str) -> str:
    """Escape text for XML content, silently dropping illegal characters.

    Examples:
        >>> escape_text("<foo bar=\\"baz\\"></foo>")
        '&lt;foo bar=&quot;baz&quot;&gt;&lt;/foo&gt;'
        >>> escape_text("\\x01foo\\x7f")
        'foo'
    """
    with XmlTextEscaper(text) as escaper:
        return "".join(escaper)


def escape_text_strict(text: str) -> str:
    """Escape text for XML content, raising IllegalCharacterError on illegal characters."""
    with XmlTextEscaper(text, filter_illegal=False) as escaper:
        return "".join(escaper)


def escape_stream(
    stream: Union[TextIO, Any],
    filter_illegal: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    correlation_id: Optional[str] = None,
) -> Iterator[str]:
    """Escape a text stream lazily, yielding chunks of escaped text.

    Each chunk holds at most ``chunk_size`` code units, plus one when needed so
    that a surrogate pair is never split across chunks. The stream is closed when
    the generator finishes or is closed.

    Args:
        stream: Readable text stream, string, or CodeUnitSource
        filter_illegal: Drop illegal characters if True, raise if False
        chunk_size: Code units per chunk
        correlation_id: Optional correlation ID for log records
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    with XmlTextEscaper(
        stream,
        filter_illegal=filter_illegal,
        chunk_size=chunk_size,
        correlation_id=correlation_id,
    ) as escaper:
        yield from _drain_chunks(escaper, chunk_size)


def escape_file(
    file_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[EscaperConfig] = None,
) -> EscapeResult:
    """Escape the contents of a text file.

    The file is processed chunk by chunk. With ``output_path`` the escaped text is
    written there and ``result.text`` is None; otherwise it is returned in
    ``result.text``.

    Args:
        file_path: File to read
        output_path: Optional file to write
        config: Escaping configuration (defaults to EscaperConfig())

    Returns:
        EscapeResult with statistics and timing

    Raises:
        IllegalCharacterError: In strict mode, on the first illegal character
        OSError: If a file cannot be opened
        UnicodeDecodeError: If the file is not valid in ``config.encoding``
    """
    config = config or EscaperConfig()
    source_path = Path(file_path)
    target_path = Path(output_path) if output_path is not None else None
    logger = get_logger(__name__, config.correlation_id, "escape_file")

    logger.info(
        "Starting file escape operation",
        extra={
            "file_path": str(source_path),
            "output_path": str(target_path) if target_path else None,
            "filter_illegal": config.filter_illegal,
        }
    )

    start_time = time.time()
    stream = source_path.open(encoding=config.encoding, newline="")
    escaper = XmlTextEscaper(
        stream,
        filter_illegal=config.filter_illegal,
        chunk_size=config.chunk_size,
        correlation_id=config.correlation_id,
    )
    result = EscapeResult(source_path=source_path, output_path=target_path)

    with escaper:
        if target_path is not None:
            with target_path.open("w", encoding=config.encoding, newline="") as output:
                for chunk in _drain_chunks(escaper, config.chunk_size):
                    output.write(chunk)
        else:
            result.text = "".join(_drain_chunks(escaper, config.chunk_size))

    result.statistics = escaper.statistics
    result.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

    logger.info(
        "Finished file escape operation",
        extra={
            "file_path": str(source_path),
            "processing_time_ms": result.processing_time_ms,
            "statistics": result.statistics.to_dict(),
        }
    )
    return result


def _drain_chunks(escaper: XmlTextEscaper, chunk_size: int) -> Iterator[str]:
    while True:
        chunk = escaper.read_chars(chunk_size)
        if not chunk:
            return
        if is_high_surrogate(ord(chunk[-1])):
            chunk += escaper.read() or ""
        yield chunk


def find_illegal_characters(
    text_or_stream: Union[str, TextIO, Any],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    limit: Optional[int] = None,
) -> List[IllegalCharacterReport]:
    """Locate every code unit the escaper would drop, without escaping anything.

    Args:
        text_or_stream: Text, readable text stream, or CodeUnitSource (closed afterwards)
        chunk_size: Characters per read when scanning a stream
        limit: Stop after this many reports

    Returns:
        Reports in input order
    """
    reports: List[IllegalCharacterReport] = []
    position = 0
    with closing(open_source(text_or_stream, chunk_size)) as source:
        while limit is None or len(reports) < limit:
            unit = source.read()
            if unit is None:
                break
            code = ord(unit)
            if unit in XML_ENTITIES or is_legal_code_unit(code):
                position += 1
                continue
            if is_supplementary(code):
                position += 2
                continue
            if is_high_surrogate(code):
                following = source.peek()
                if following is not None and is_low_surrogate(ord(following)):
                    source.read()
                    position += 2
                    continue
            reports.append(IllegalCharacterReport(
                position=position,
                code_unit=code,
                reason=describe_illegal_code_unit(code) or "",
            ))
            position += 1
    return reports
