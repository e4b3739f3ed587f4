# tests/unit/test_main.py - v1
"""Tests for main.py: CLI entry point."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from caseintake.main import _build_parser, main


@pytest.fixture
def fixtures_file(tmp_path: Path) -> Path:
    path = tmp_path / "fixtures.json"
    path.write_text(json.dumps({
        "records": {"1001": {"Status_Streamline_Options": "Received", "IsRushOrder": True}},
        "orders": {"2002": {"id": 2002}},
        "failures": {"3003": {"message": "order not found", "code": "NOT_FOUND"}},
    }), encoding="utf-8")
    return path


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    path = tmp_path / "ids.txt"
    path.write_text("1001\n2002\n3003\nabc\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    # Keep any developer .env out of Settings()
    monkeypatch.chdir(tmp_path)


class TestBuildParser:
    def test_version_flag(self):
        parser = _build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_receive_subcommand(self):
        args = _build_parser().parse_args(["receive", "ids.txt", "--backend", "memory"])
        assert args.command == "receive"
        assert args.mode == "receive"
        assert args.input == "ids.txt"
        assert args.backend == "memory"
        assert args.as_json is False

    def test_status_update_subcommand(self):
        args = _build_parser().parse_args(["status-update", "-"])
        assert args.mode == "status_update"
        assert args.input == "-"

    def test_count_subcommand(self):
        args = _build_parser().parse_args(["count", "ids.txt"])
        assert args.command == "count"

    def test_invalid_backend(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["receive", "x", "--backend", "ftp"])


class TestMain:
    def test_no_command_prints_help(self):
        assert main([]) == 1

    def test_count(self, input_file, capsys):
        assert main(["count", str(input_file)]) == 0
        assert capsys.readouterr().out.strip() == "3"

    def test_count_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("1\n2\nx\n"))
        assert main(["count", "-"]) == 0
        assert capsys.readouterr().out.strip() == "2"

    def test_receive_with_fixtures(self, input_file, fixtures_file, capsys):
        code = main(["receive", str(input_file), "--fixtures", str(fixtures_file)])
        assert code == 0
        out = capsys.readouterr().out
        assert "Existing:     1" in out
        assert "Resolved:     1" in out
        assert "Failed:       1" in out
        assert "order not found [NOT_FOUND]" in out

    def test_receive_json(self, input_file, fixtures_file, capsys):
        code = main(["receive", str(input_file), "--fixtures", str(fixtures_file), "--json"])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["snapshot"]["total_completed"] == 3
        assert payload["snapshot"]["existing_bucket"][0]["identifier"] == "1001"

    def test_status_update_with_fixtures(self, input_file, fixtures_file, capsys):
        code = main(["status-update", str(input_file), "--fixtures", str(fixtures_file), "--json"])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["mode"] == "status_update"
        assert payload["snapshot"]["existing"] == 1
        assert payload["snapshot"]["failed"] == 2

    def test_empty_input_fails(self, tmp_path, fixtures_file):
        empty = tmp_path / "empty.txt"
        empty.write_text("abc\n\n", encoding="utf-8")
        assert main(["receive", str(empty), "--fixtures", str(fixtures_file)]) == 1

    def test_memory_backend_without_fixtures_fails(self, input_file):
        assert main(["receive", str(input_file), "--backend", "memory"]) == 1
