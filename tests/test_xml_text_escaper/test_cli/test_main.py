"""Tests for the CLI main module."""

import io
import json
import logging
from unittest.mock import patch

import pytest

from xml_text_escaper.cli.main import (
    create_argument_parser,
    format_check_results,
    load_config,
    main,
)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo the handler and level that main() installs."""
    logger = logging.getLogger("xml_text_escaper")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestArgumentParser:
    """Test argument parsing."""

    def test_escape_defaults(self):
        """Test escape command defaults."""
        args = create_argument_parser().parse_args(["escape"])
        assert args.command == "escape"
        assert args.paths == []
        assert args.strict is False
        assert args.suffix == "_escaped"

    def test_check_requires_paths(self):
        """Test that check needs at least one file."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["check"])

    def test_version(self, capsys):
        """Test the version flag."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_no_command(self, capsys):
        """Test that running without a command prints help."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    @patch("xml_text_escaper.cli.main.cmd_escape", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, mock_escape, capsys):
        """Test the exit status after an interrupt."""
        assert main(["escape"]) == 130
        assert "interrupted" in capsys.readouterr().err
        mock_escape.assert_called_once()


class TestLoadConfig:
    """Test configuration assembly from arguments."""

    def test_overrides(self):
        """Test command-line overrides."""
        args = create_argument_parser().parse_args(
            ["escape", "--strict", "--chunk-size", "16", "-e", "latin-1"]
        )
        config = load_config(args)
        assert config.filter_illegal is False
        assert config.chunk_size == 16
        assert config.encoding == "latin-1"

    def test_file_then_overrides(self, tmp_path):
        """Test that flags take precedence over the config file."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"chunk_size": 8, "encoding": "ascii"}))
        args = create_argument_parser().parse_args(
            ["escape", "-c", str(config_path), "-e", "utf-8"]
        )
        config = load_config(args)
        assert config.chunk_size == 8
        assert config.encoding == "utf-8"


class TestEscapeCommand:
    """Test the escape command."""

    def test_escape_stdin(self, monkeypatch, capsys):
        """Test escaping standard input to standard output."""
        monkeypatch.setattr("sys.stdin", io.StringIO("<a href='x'>\u0001"))

        assert main(["escape"]) == 0
        assert capsys.readouterr().out == "&lt;a href=&apos;x&apos;&gt;"

    def test_escape_stdin_to_output(self, monkeypatch, tmp_path, capsys):
        """Test that --output also applies to standard input."""
        monkeypatch.setattr("sys.stdin", io.StringIO("<a>"))
        target = tmp_path / "out" / "stdin.txt"

        assert main(["escape", "-o", str(target)]) == 0
        assert target.read_text(encoding="utf-8") == "&lt;a&gt;"
        assert capsys.readouterr().out == ""

    def test_stdin_not_closed(self, monkeypatch, capsys):
        """Test that standard input stays open after escaping."""
        stdin = io.StringIO("a&b")
        monkeypatch.setattr("sys.stdin", stdin)

        assert main(["escape", "-"]) == 0
        assert capsys.readouterr().out == "a&amp;b"
        assert not stdin.closed

    def test_escape_stdin_strict(self, monkeypatch, capsys):
        """Test strict mode failure on standard input."""
        monkeypatch.setattr("sys.stdin", io.StringIO("ok\u000b"))

        assert main(["escape", "--strict"]) == 1
        assert "Illegal character: 'B'" in capsys.readouterr().err

    def test_escape_file_to_stdout(self, tmp_path, capsys):
        """Test escaping a file to standard output."""
        source = tmp_path / "in.txt"
        source.write_text("1 < 2", encoding="utf-8")

        assert main(["escape", str(source)]) == 0
        assert capsys.readouterr().out == "1 &lt; 2"

    def test_escape_file_to_output(self, tmp_path, capsys):
        """Test writing a single file to --output."""
        source = tmp_path / "in.txt"
        target = tmp_path / "out" / "result.txt"
        source.write_text("\"quoted\"", encoding="utf-8")

        assert main(["escape", str(source), "-o", str(target)]) == 0
        assert target.read_text(encoding="utf-8") == "&quot;quoted&quot;"
        assert "Escaped:" in capsys.readouterr().err

    def test_escape_to_output_dir(self, tmp_path):
        """Test writing several files to --output-dir."""
        first = tmp_path / "a.txt"
        second = tmp_path / "b.txt"
        first.write_text("&", encoding="utf-8")
        second.write_text(">", encoding="utf-8")
        out_dir = tmp_path / "escaped"

        assert main(["-q", "escape", str(first), str(second), "-d", str(out_dir)]) == 0
        assert (out_dir / "a_escaped.txt").read_text(encoding="utf-8") == "&amp;"
        assert (out_dir / "b_escaped.txt").read_text(encoding="utf-8") == "&gt;"

    def test_output_with_several_inputs(self, tmp_path, capsys):
        """Test that --output rejects more than one input."""
        assert main(["escape", "a.txt", "b.txt", "-o", str(tmp_path / "x")]) == 2
        assert "--output-dir" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """Test that an unreadable input is reported."""
        assert main(["escape", str(tmp_path / "missing.txt")]) == 1
        assert "missing.txt" in capsys.readouterr().err

    def test_strict_file(self, tmp_path, capsys):
        """Test strict mode failure on a file."""
        source = tmp_path / "in.txt"
        source.write_text("ab\u0007", encoding="utf-8")

        assert main(["escape", "--strict", str(source)]) == 1
        assert "Illegal character: '7' at position 2" in capsys.readouterr().err

    def test_zero_chunk_size(self, tmp_path, capsys):
        """Test that --chunk-size 0 is rejected instead of ignored."""
        source = tmp_path / "in.txt"
        source.write_text("a", encoding="utf-8")

        assert main(["escape", "--chunk-size", "0", str(source)]) == 2
        assert "chunk_size" in capsys.readouterr().err

    def test_config_logging_level(self, tmp_path, capsys):
        """Test that the configured logging level is applied."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"logging_level": "DEBUG"}))
        source = tmp_path / "in.txt"
        source.write_text("a", encoding="utf-8")

        assert main(["escape", "-c", str(config_path), str(source)]) == 0
        assert logging.getLogger("xml_text_escaper").level == logging.DEBUG

    def test_quiet_overrides_config_logging_level(self, tmp_path, capsys):
        """Test that --quiet wins over the configured level."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"logging_level": "DEBUG"}))
        source = tmp_path / "in.txt"
        source.write_text("a", encoding="utf-8")

        assert main(["-q", "escape", "-c", str(config_path), str(source)]) == 0
        assert logging.getLogger("xml_text_escaper").level == logging.ERROR

    def test_invalid_config(self, tmp_path, capsys):
        """Test that a bad configuration file exits with status 2."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"chunk_size": -1}))

        assert main(["escape", "-c", str(config_path)]) == 2
        assert "Configuration error" in capsys.readouterr().err


class TestCheckCommand:
    """Test the check command."""

    def test_clean_file(self, tmp_path, capsys):
        """Test that a clean file exits with status 0."""
        source = tmp_path / "clean.txt"
        source.write_text("<xml> & friends", encoding="utf-8")

        assert main(["check", str(source)]) == 0
        assert "1 clean" in capsys.readouterr().out

    def test_dirty_file_json(self, tmp_path, capsys):
        """Test JSON findings for a file with illegal characters."""
        source = tmp_path / "dirty.txt"
        source.write_text("abc\u000bd\u007f", encoding="utf-8")

        assert main(["check", "-f", "json", str(source)]) == 1
        results = json.loads(capsys.readouterr().out)
        assert results[0]["clean"] is False
        assert results[0]["illegal_characters"] == [
            {"position": 3, "code_unit": "U+000B", "reason": "Control character: U+000B"},
            {"position": 5, "code_unit": "U+007F", "reason": "Control character: U+007F"},
        ]

    def test_limit(self, tmp_path, capsys):
        """Test the per-file finding limit."""
        source = tmp_path / "dirty.txt"
        source.write_text("\u0001" * 5, encoding="utf-8")

        assert main(["check", "-f", "json", "--limit", "2", str(source)]) == 1
        results = json.loads(capsys.readouterr().out)
        assert len(results[0]["illegal_characters"]) == 2

    def test_missing_file(self, tmp_path, capsys):
        """Test that a missing file is reported as not clean."""
        assert main(["check", str(tmp_path / "nope.txt")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_text_format_truncates_findings(self):
        """Test that long finding lists are shortened."""
        findings = [
            {"position": i, "code_unit": "U+0001", "reason": "Control character: U+0001"}
            for i in range(5)
        ]
        output = format_check_results(
            [{"file": "x.txt", "clean": False, "illegal_characters": findings}], "text"
        )
        assert "Position 0: Control character: U+0001" in output
        assert "... and 2 more" in output

    def test_text_format_empty(self):
        """Test formatting with no results."""
        assert format_check_results([], "text") == "No results to display."


class TestBenchCommand:
    """Test the bench command."""

    def test_bench(self, capsys):
        """Test a small benchmark run."""
        assert main(["bench", "-n", "100", "--char", "<"]) == 0
        output = capsys.readouterr().out
        assert "Output units:    400" in output
        assert "Max buffer size: 4" in output

    def test_bench_report(self, tmp_path):
        """Test writing a JSON performance report."""
        report_path = tmp_path / "report.json"

        assert main(["-q", "bench", "-n", "10", "--report", str(report_path)]) == 0
        report = json.loads(report_path.read_text())
        assert report["summary"]["session_count"] == 1
        assert report["sessions"][0]["metadata"]["output_length"] == 50

    @pytest.mark.parametrize("argv", [
        ["bench", "-n", "-1"],
        ["bench", "--char", "ab"],
        ["bench", "--char", "\u0001"],
        ["bench", "--char", "\ud834"],
    ])
    def test_bench_invalid_arguments(self, argv, capsys):
        """Test argument validation."""
        assert main(argv) == 2
