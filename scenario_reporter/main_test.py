"""Tests for the scenario reporter main entry point."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from scenario_reporter.main import main, parse_args

EVENTS = (
    "- {type: run_started, timestamp: '2024-05-01T10:00:00Z'}\n"
    "- {type: run_finished, timestamp: '2024-05-01T10:00:01Z'}\n"
)


class TestParseArgs:
    """Tests for command-line argument parsing."""

    def test_events_required(self):
        """--events is mandatory."""
        with pytest.raises(SystemExit):
            parse_args([])

    def test_defaults(self):
        args = parse_args(["--events", "run.yaml"])
        assert args.events == Path("run.yaml")
        assert args.output is None
        assert args.config_file is None

    def test_all_options(self):
        args = parse_args([
            "--events", "run.jsonl",
            "--output", "out/messages.txt",
            "--config-file", "reporter.json",
        ])
        assert args.output == Path("out/messages.txt")
        assert args.config_file == Path("reporter.json")


class TestMain:
    """Tests for main()."""

    def test_missing_event_log(self, capsys):
        """A missing event log is reported and returns 1."""
        assert main(["--events", "/nonexistent/run.yaml"]) == 1
        assert "Error: Event log not found" in capsys.readouterr().err

    def test_invalid_event_log(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.yaml"
            path.write_text("- {type: run_started}\n")
            assert main(["--events", str(path)]) == 1
            err = capsys.readouterr().err
            assert "Error: Invalid event log" in err
            assert "record 1" in err

    def test_unreadable_event_logs_return_1(self, capsys):
        """Undecodable files, directories and non-string types are reported, not raised."""
        with tempfile.TemporaryDirectory() as tmpdir:
            binary = Path(tmpdir) / "binary.jsonl"
            binary.write_bytes(b"\xff\xfe\n")
            bad_type = Path(tmpdir) / "bad_type.jsonl"
            bad_type.write_text(
                json.dumps({"type": ["run_started"], "timestamp": "2024-05-01T10:00:00Z"})
                + "\n"
            )

            for path in (binary, Path(tmpdir), bad_type):
                assert main(["--events", str(path)]) == 1
                err = capsys.readouterr().err
                assert "Error: Invalid event log" in err
                assert "Traceback" not in err

    def test_writes_to_stdout(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.yaml"
            path.write_text(EVENTS)
            assert main(["--events", str(path)]) == 0
            out = capsys.readouterr().out.splitlines()
            assert out[0] == "##teamcity[enteredTheMatrix timestamp='2024-05-01T10:00:00.000+0000']"
            assert out[-1] == (
                "##teamcity[testSuiteFinished timestamp='2024-05-01T10:00:01.000+0000' "
                "name='Cucumber']"
            )

    def test_writes_to_output_file(self, capsys):
        """--output writes markers to a file, creating parent directories."""
        with tempfile.TemporaryDirectory() as tmpdir:
            events = Path(tmpdir) / "run.yaml"
            events.write_text(EVENTS)
            output = Path(tmpdir) / "out" / "messages.txt"
            assert main(["--events", str(events), "--output", str(output)]) == 0

            lines = output.read_text().splitlines()
            assert len(lines) == 5
            captured = capsys.readouterr()
            assert captured.out == ""
            assert "Service messages written to" in captured.err

    def test_config_file_changes_prefix_and_run_name(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            events = Path(tmpdir) / "run.yaml"
            events.write_text(EVENTS)
            config = Path(tmpdir) / "reporter.json"
            config.write_text(json.dumps({"prefix": "tc", "run_name": "Behave"}))
            assert main(["--events", str(events), "--config-file", str(config)]) == 0

            out = capsys.readouterr().out.splitlines()
            assert all(line.startswith("##tc[") for line in out)
            assert "name='Behave'" in out[1]
