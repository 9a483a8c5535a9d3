#!/usr/bin/env python3
"""
XML Text Escaper Examples

This script demonstrates the main usage patterns for the streaming escaper,
including one-call escaping, strict mode, pull-based reading, chunked streams,
and inspecting statistics.
"""

import io
import sys
from pathlib import Path

# Add src to path for running examples directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_text_escaper import (
    EscaperConfig,
    IllegalCharacterError,
    XmlTextEscaper,
    escape_stream,
    escape_text,
    escape_text_strict,
    find_illegal_characters,
)


def example_basic_usage():
    """Example 1: Escaping a string in one call."""
    print("=== Example 1: Basic Usage ===")

    print(escape_text('<note to="Tove">Fish & Chips</note>'))
    print(repr(escape_text("bell\x07 and vertical tab\x0b removed")))
    print()


def example_strict_mode():
    """Example 2: Failing on the first illegal character."""
    print("=== Example 2: Strict Mode ===")

    try:
        escape_text_strict("valid text\x01")
    except IllegalCharacterError as e:
        print(f"Rejected: {e} (code unit 0x{e.code_unit:X})")
    print()


def example_pull_reading():
    """Example 3: Pulling escaped code units one at a time."""
    print("=== Example 3: Pull Reading ===")

    with XmlTextEscaper("a<b") as escaper:
        print(f"Peek: {escaper.peek()!r}")
        units = []
        while escaper.peek() is not None:
            units.append(escaper.read())
        print(f"Units: {units}")
        print(f"Statistics: {escaper.statistics.to_dict()}")
    print()


def example_streaming():
    """Example 4: Escaping a stream in bounded chunks."""
    print("=== Example 4: Streaming ===")

    stream = io.StringIO("<row>" * 10)
    for index, chunk in enumerate(escape_stream(stream, chunk_size=16)):
        print(f"Chunk {index}: {chunk}")
    print()


def example_checking():
    """Example 5: Locating characters XML cannot carry."""
    print("=== Example 5: Checking ===")

    for report in find_illegal_characters("ok\x0c then \x7f"):
        print(f"Position {report.position}: {report.reason}")
    print()


def example_configuration():
    """Example 6: Configuration presets and serialization."""
    print("=== Example 6: Configuration ===")

    config = EscaperConfig.strict().override(chunk_size=1024)
    print(config.to_json())
    print()


def main():
    """Run all examples."""
    print("XML Text Escaper Examples")
    print("=" * 50)
    print()

    example_basic_usage()
    example_strict_mode()
    example_pull_reading()
    example_streaming()
    example_checking()
    example_configuration()


if __name__ == "__main__":
    main()
