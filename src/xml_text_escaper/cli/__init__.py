"""Command-line interface module for XML Text Escaper.

This module provides CLI tools for escaping files and standard input, checking
files for illegal XML characters, and benchmarking the streaming escaper.
"""

from .main import main

__all__ = ["main"]
