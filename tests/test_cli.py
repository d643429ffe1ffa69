"""Tests for the plcrashutil command line."""

from __future__ import annotations

import json

import pytest

import plcrash
from plcrash.cli import main
from plcrash.cli.parser import _build_parser, _preprocess_argv


@pytest.fixture
def crash_file(tmp_path, demo_container):
    path = tmp_path / "demo.plcrash"
    path.write_bytes(demo_container)
    return path


# =============================================================================
# Argument handling
# =============================================================================

class TestPreprocessArgv:
    def test_json_after_subcommand_moves_front(self):
        assert _preprocess_argv(["convert", "x.plcrash", "--json"]) == ["--json", "convert", "x.plcrash"]

    def test_log_level_with_value(self):
        assert _preprocess_argv(["convert", "--log-level", "debug", "x"]) == [
            "--log-level", "debug", "convert", "x",
        ]

    def test_log_level_equals_form(self):
        assert _preprocess_argv(["convert", "x", "--log-level=INFO"]) == ["--log-level=INFO", "convert", "x"]

    def test_dangling_log_level_left_for_argparse(self):
        assert _preprocess_argv(["convert", "--log-level"]) == ["convert", "--log-level"]

    def test_tokens_after_double_dash_untouched(self):
        assert _preprocess_argv(["convert", "--", "--json"]) == ["convert", "--", "--json"]


class TestParser:
    def test_default_format_is_iphone(self):
        args = _build_parser().parse_args(["convert", "x.plcrash"])
        assert args.format_name == "iphone"
        assert args.file == "x.plcrash"
        assert args.log_level == "WARNING"
        assert not args.json

    def test_short_format_flag(self):
        args = _build_parser().parse_args(["convert", "-f", "ios", "x.plcrash"])
        assert args.format_name == "ios"

    def test_log_level_case_insensitive(self):
        args = _build_parser().parse_args(["--log-level", "debug", "convert", "x"])
        assert args.log_level == "DEBUG"

    def test_subcommand_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_missing_file_argument(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["convert"])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert plcrash.__version__ in capsys.readouterr().out


# =============================================================================
# convert
# =============================================================================

class TestConvert:
    def test_prints_report(self, crash_file, demo_container, capsys):
        assert main(["convert", str(crash_file)]) == 0
        out = capsys.readouterr().out
        assert out == plcrash.render(plcrash.decode(demo_container))

    @pytest.mark.parametrize("fmt", ["ios", "iphone", "IOS", "iPhone"])
    def test_format_names(self, crash_file, fmt, capsys):
        assert main(["convert", f"--format={fmt}", str(crash_file)]) == 0
        assert capsys.readouterr().out.startswith("Incident Identifier:")

    def test_unsupported_format(self, crash_file, capsys):
        assert main(["convert", "--format", "mac", str(crash_file)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Unsupported format: mac" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["convert", str(tmp_path / "nope.plcrash")]) == 1
        assert "Could not read" in capsys.readouterr().err

    def test_directory_is_unreadable(self, tmp_path, capsys):
        assert main(["convert", str(tmp_path)]) == 1
        assert "Could not read" in capsys.readouterr().err

    def test_invalid_file(self, tmp_path, capsys):
        path = tmp_path / "bad.plcrash"
        path.write_bytes(b"NOTACRASHLOG")
        assert main(["convert", str(path)]) == 1
        assert "invalid crash log header" in capsys.readouterr().err

    def test_truncated_file(self, tmp_path, capsys):
        path = tmp_path / "short.plcrash"
        path.write_bytes(b"plc")
        assert main(["convert", str(path)]) == 1
        assert "truncated crash log" in capsys.readouterr().err


class TestConvertJson:
    def test_json_report(self, crash_file, capsys):
        assert main(["convert", str(crash_file), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["format"] == "ios"
        assert data["report"].startswith("Incident Identifier: ???\n")
        assert "Thread 0 Crashed:" in data["report"]

    def test_json_error(self, tmp_path, capsys):
        path = tmp_path / "bad.plcrash"
        path.write_bytes(b"plcrash\x07")
        assert main(["--json", "convert", str(path)]) == 1
        data = json.loads(capsys.readouterr().out)
        assert "unsupported crash report version: 7" in data["error"]

    def test_json_unsupported_format(self, crash_file, capsys):
        assert main(["--json", "convert", "-f", "android", str(crash_file)]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["error"] == "Unsupported format: android"
