"""Pull-based UTF-16 code-unit sources.

The escaper reasons about UTF-16 code units, one at a time. Sources hand out each
character of the text as one unit: surrogate code points already present in the
text are individual units, and a character above the Basic Multilingual Plane is
a single unit that stands for its surrogate pair, so joining the output with
``"".join`` gives back exactly the characters that went in.
"""

import io
from typing import Optional, Protocol, runtime_checkable

from xml_text_escaper.shared.config import DEFAULT_CHUNK_SIZE


@runtime_checkable
class CodeUnitSource(Protocol):
    """Anything that hands out UTF-16 code units on demand.

    ``peek`` and ``read`` return a one-character string, or None once the source
    is exhausted. A character above U+FFFF is a surrogate pair delivered as one
    unit. ``close`` releases whatever the source holds and may be called more
    than once.
    """

    def peek(self) -> Optional[str]:
        ...

    def read(self) -> Optional[str]:
        ...

    def close(self) -> None:
        ...


class _ChunkedSource:
    """Shared cursor logic for sources that receive their text in chunks."""

    def __init__(self) -> None:
        self._chunk = ""
        self._index = 0
        self._exhausted = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _next_chunk(self) -> str:
        raise NotImplementedError

    def _release(self) -> None:
        """Release the underlying resource."""

    def peek(self) -> Optional[str]:
        if self._closed:
            raise ValueError("I/O operation on closed source")
        while self._index >= len(self._chunk):
            if self._exhausted:
                return None
            chunk = self._next_chunk()
            if not chunk:
                self._exhausted = True
                self._chunk = ""
                self._index = 0
                return None
            self._chunk = chunk
            self._index = 0
        return self._chunk[self._index]

    def read(self) -> Optional[str]:
        unit = self.peek()
        if unit is not None:
            self._index += 1
        return unit

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._chunk = ""
        self._release()

    def __enter__(self) -> "_ChunkedSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class StringSource(_ChunkedSource):
    """Code-unit source over an in-memory string."""

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"StringSource requires str, got {type(text).__name__}")
        super().__init__()
        self._text: Optional[str] = text

    def _next_chunk(self) -> str:
        text, self._text = self._text, None
        return text or ""

    def _release(self) -> None:
        self._text = None


class TextStreamSource(_ChunkedSource):
    """Code-unit source over a file-like object opened in text mode.

    The stream is read ``chunk_size`` characters at a time and is closed together
    with the source.
    """

    def __init__(self, stream: io.TextIOBase, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        super().__init__()
        self._stream = stream
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def _next_chunk(self) -> str:
        chunk = self._stream.read(self._chunk_size)
        if isinstance(chunk, (bytes, bytearray)):
            raise TypeError("Stream returned bytes; open it in text mode")
        return chunk

    def _release(self) -> None:
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()


def open_source(obj: object, chunk_size: int = DEFAULT_CHUNK_SIZE) -> CodeUnitSource:
    """Adapt a string, text stream, or existing source to CodeUnitSource.

    Args:
        obj: Text, a readable text stream, or a CodeUnitSource
        chunk_size: Characters per read when wrapping a stream

    Returns:
        A CodeUnitSource that owns ``obj``

    Raises:
        TypeError: If ``obj`` is bytes or cannot be read as text
    """
    if isinstance(obj, str):
        return StringSource(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        raise TypeError("Escaping works on decoded text; decode bytes first")
    if isinstance(obj, (io.BufferedIOBase, io.RawIOBase)):
        raise TypeError("Binary streams are not supported; open the file in text mode")
    if isinstance(obj, io.TextIOBase):
        return TextStreamSource(obj, chunk_size)
    if isinstance(obj, CodeUnitSource):
        return obj
    if callable(getattr(obj, "read", None)):
        return TextStreamSource(obj, chunk_size)  # type: ignore[arg-type]
    raise TypeError(f"Cannot read code units from {type(obj).__name__}")
