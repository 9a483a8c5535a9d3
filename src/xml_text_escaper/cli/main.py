"""Main CLI entry point for the xml-text-escape command-line tool.

Provides commands for escaping files or standard input, checking files for
characters XML cannot carry, and benchmarking the streaming escaper.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from xml_text_escaper import __version__
from xml_text_escaper.api import escape_file, escape_stream, find_illegal_characters
from xml_text_escaper.character.classification import MAX_CODE_UNIT, is_legal_code_unit
from xml_text_escaper.character.escaper import IllegalCharacterError
from xml_text_escaper.shared.config import (
    DEFAULT_LOGGING_LEVEL,
    ConfigError,
    EscaperConfig,
)
from xml_text_escaper.shared.logging import configure_logging, get_logger
from xml_text_escaper.tools.profiling import PerformanceProfiler, benchmark_escaper

STDIN_MARKER = Path("-")
DEFAULT_BENCH_COUNT = 1 << 16
MAX_ERRORS_SHOWN = 3


class _StdinReader:
    """Readable view of stdin that the escaper may close without closing stdin."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def read(self, size: int = -1) -> str:
        return self._stream.read(size)


def load_config(args: argparse.Namespace) -> EscaperConfig:
    """Build the escaper configuration from a config file and command-line overrides."""
    config = EscaperConfig()
    if getattr(args, "config", None):
        config = EscaperConfig.from_file(args.config)

    overrides: Dict[str, Any] = {}
    if getattr(args, "strict", False):
        overrides["filter_illegal"] = False
    if getattr(args, "chunk_size", None) is not None:
        overrides["chunk_size"] = args.chunk_size
    if getattr(args, "encoding", None):
        overrides["encoding"] = args.encoding
    return config.override(**overrides) if overrides else config


def apply_logging_level(args: argparse.Namespace, config: EscaperConfig) -> None:
    """Use the configured logging level unless --verbose or --quiet was given."""
    if not (args.verbose or args.quiet):
        configure_logging(config.logging_level)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-text-escape",
        description="Escape text so it can be embedded verbatim in XML content"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Escape command
    escape_parser = subparsers.add_parser("escape", help="Escape files or standard input")
    escape_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Text files to escape (default: standard input, also '-')"
    )
    escape_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file for a single input (default: stdout)"
    )
    escape_parser.add_argument(
        "--output-dir", "-d",
        type=Path,
        help="Output directory for escaped files"
    )
    escape_parser.add_argument(
        "--suffix",
        default="_escaped",
        help="Suffix for files written to --output-dir (default: _escaped)"
    )
    escape_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on illegal characters instead of dropping them"
    )
    escape_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    escape_parser.add_argument(
        "--chunk-size",
        type=int,
        help="Characters read per chunk"
    )
    escape_parser.add_argument(
        "--encoding", "-e",
        help="File encoding (default: utf-8)"
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check", help="Report characters that cannot appear in XML text"
    )
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Text files to check"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )
    check_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Stop after this many findings per file"
    )
    check_parser.add_argument(
        "--encoding", "-e",
        help="File encoding (default: utf-8)"
    )
    check_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    # Bench command
    bench_parser = subparsers.add_parser(
        "bench", help="Stream a large generated input through the escaper"
    )
    bench_parser.add_argument(
        "--count", "-n",
        type=int,
        default=DEFAULT_BENCH_COUNT,
        help=f"Number of input characters (default: {DEFAULT_BENCH_COUNT})"
    )
    bench_parser.add_argument(
        "--char",
        default="&",
        help="Character to repeat (default: &)"
    )
    bench_parser.add_argument(
        "--report",
        type=Path,
        help="Write a JSON performance report to this file"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def _output_path_for(path: Path, args: argparse.Namespace) -> Optional[Path]:
    if args.output:
        return args.output
    if args.output_dir:
        return args.output_dir / f"{path.stem}{args.suffix}{path.suffix}"
    return None


def _escape_stdin(config: EscaperConfig, output_path: Optional[Path]) -> None:
    chunks = escape_stream(
        _StdinReader(sys.stdin),
        filter_illegal=config.filter_illegal,
        chunk_size=config.chunk_size,
        correlation_id=config.correlation_id,
    )
    if output_path is None:
        for chunk in chunks:
            sys.stdout.write(chunk)
        sys.stdout.flush()
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding=config.encoding, newline="") as output:
        for chunk in chunks:
            output.write(chunk)


def cmd_escape(args: argparse.Namespace) -> int:
    """Handle escape command."""
    config = load_config(args)
    apply_logging_level(args, config)
    logger = get_logger(__name__, config.correlation_id, "cli_escape")
    paths: List[Path] = args.paths or [STDIN_MARKER]

    if args.output and len(paths) > 1:
        print("--output accepts a single input; use --output-dir", file=sys.stderr)
        return 2

    failures = 0
    for path in paths:
        if path == STDIN_MARKER:
            try:
                _escape_stdin(config, args.output)
            except IllegalCharacterError as e:
                print(f"Error: <stdin>: {e}", file=sys.stderr)
                failures += 1
            except OSError as e:
                print(f"Error: {args.output}: {e}", file=sys.stderr)
                failures += 1
            else:
                if args.output and not args.quiet:
                    print(f"Escaped: <stdin> -> {args.output}", file=sys.stderr)
            continue

        output_path = _output_path_for(path, args)
        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            result = escape_file(path, output_path, config)
        except IllegalCharacterError as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            failures += 1
            continue
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not escape file", extra={"file": str(path), "error": str(e)})
            print(f"Error: {path}: {e}", file=sys.stderr)
            failures += 1
            continue

        if result.text is not None:
            sys.stdout.write(result.text)
            sys.stdout.flush()
        elif not args.quiet:
            print(f"Escaped: {path} -> {output_path}", file=sys.stderr)

    return 1 if failures else 0


def format_check_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    clean_count = sum(1 for r in results if r.get("clean", False))
    lines = [f"Checked {len(results)} files, {clean_count} clean", "-" * 50]

    for result in results:
        status = "✓" if result.get("clean", False) else "✗"
        lines.append(f"{status} {result['file']}")
        if "error" in result:
            lines.append(f"   Error: {result['error']}")
            continue
        findings = result.get("illegal_characters", [])
        for finding in findings[:MAX_ERRORS_SHOWN]:
            lines.append(f"   Position {finding['position']}: {finding['reason']}")
        if len(findings) > MAX_ERRORS_SHOWN:
            lines.append(f"   ... and {len(findings) - MAX_ERRORS_SHOWN} more")

    return "\n".join(lines)


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = load_config(args)
    apply_logging_level(args, config)
    results: List[Dict[str, Any]] = []

    for path in args.paths:
        if not path.is_file():
            results.append({"file": str(path), "clean": False, "error": "File not found"})
            continue
        try:
            stream = path.open(encoding=config.encoding, newline="")
            reports = find_illegal_characters(stream, config.chunk_size, args.limit)
        except (OSError, UnicodeDecodeError) as e:
            results.append({"file": str(path), "clean": False, "error": str(e)})
            continue
        results.append({
            "file": str(path),
            "clean": not reports,
            "illegal_characters": [report.to_dict() for report in reports],
        })

    print(format_check_results(results, args.format))
    return 0 if all(r.get("clean", False) for r in results) else 1


def cmd_bench(args: argparse.Namespace) -> int:
    """Handle bench command."""
    if args.count < 0:
        print("--count must be >= 0", file=sys.stderr)
        return 2
    if len(args.char) != 1 or ord(args.char) > MAX_CODE_UNIT:
        print("--char must be a single BMP character", file=sys.stderr)
        return 2
    if not is_legal_code_unit(ord(args.char)):
        print("--char must be a character XML text allows", file=sys.stderr)
        return 2

    profiler = PerformanceProfiler()
    session = benchmark_escaper(args.count, args.char, profiler)
    metadata = session.metadata

    if not args.quiet:
        print(f"Input units:     {session.input_size}")
        print(f"Output units:    {metadata['output_length']}")
        print(f"Expected units:  {metadata['expected_length']}")
        print(f"Max buffer size: {metadata['max_buffer_size']}")
        print(f"Duration:        {session.total_duration_ms:.1f}ms")
        print(f"Memory delta:    {session.memory_delta} bytes")

    if args.report:
        profiler.save_report(profiler.generate_report(), args.report)

    return 0 if metadata["output_length"] == metadata["expected_length"] else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(DEFAULT_LOGGING_LEVEL)

    # Route to appropriate command handler
    try:
        if args.command == "escape":
            return cmd_escape(args)
        if args.command == "check":
            return cmd_check(args)
        if args.command == "bench":
            return cmd_bench(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
