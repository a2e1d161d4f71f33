"""Unit tests for the config module."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from scenario_reporter.config import DEFAULT_CONFIG, ReporterConfig


class TestReporterConfigCreate:
    """Tests for creating ReporterConfig instances."""

    def test_no_path_uses_defaults(self):
        """No path gives default config values."""
        cfg = ReporterConfig(None)
        assert cfg.prefix == "teamcity"
        assert cfg.run_name == "Cucumber"
        assert cfg.location_scheme == "test"
        assert cfg.fixture_failure_name == "Before All/After All"
        assert cfg.progress_category == "Scenarios"

    def test_nonexistent_path_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            cfg = ReporterConfig(Path(tmpdir) / "missing.json")
            assert cfg.config == DEFAULT_CONFIG

    def test_partial_file_fills_defaults(self):
        """Missing keys in the config file are filled from defaults."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "reporter.json"
            path.write_text(json.dumps({"run_name": "Behave"}))
            cfg = ReporterConfig(path)
            assert cfg.run_name == "Behave"
            assert cfg.prefix == "teamcity"  # default

    def test_corrupted_file_uses_defaults(self):
        """Corrupted JSON falls back to defaults."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "reporter.json"
            path.write_text("{ invalid json }")
            cfg = ReporterConfig(path)
            assert cfg.config == DEFAULT_CONFIG

    def test_non_object_file_uses_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "reporter.json"
            path.write_text("[1, 2]")
            assert ReporterConfig(path).config == DEFAULT_CONFIG


class TestReporterConfigSave:
    """Tests for saving config."""

    def test_save_round_trip(self):
        """Saved values are read back by a new instance."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "reporter.json"
            cfg = ReporterConfig(path)
            cfg.set_config(prefix="tc", location_scheme="java:test")
            cfg.save()

            reloaded = ReporterConfig(path)
            assert reloaded.prefix == "tc"
            assert reloaded.location_scheme == "java:test"
            assert path.read_text().endswith("\n")

    def test_save_without_path_raises(self):
        with pytest.raises(ValueError):
            ReporterConfig(None).save()

    def test_set_config_ignores_none(self):
        cfg = ReporterConfig()
        cfg.set_config(run_name="Run")
        assert cfg.run_name == "Run"
        assert cfg.prefix == "teamcity"

    def test_set_config_covers_every_key(self):
        """Every configurable key can be set and survives a save."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "reporter.json"
            cfg = ReporterConfig(path)
            cfg.set_config(
                prefix="tc",
                run_name="Behave",
                location_scheme="py",
                fixture_failure_name="Global hooks",
                progress_category="Examples",
            )
            cfg.save()

            reloaded = ReporterConfig(path)
            assert reloaded.config == {
                "prefix": "tc",
                "run_name": "Behave",
                "location_scheme": "py",
                "fixture_failure_name": "Global hooks",
                "progress_category": "Examples",
            }
            assert set(reloaded.config) == set(DEFAULT_CONFIG)

    def test_config_returns_copy(self):
        cfg = ReporterConfig()
        cfg.config["prefix"] = "changed"
        assert cfg.prefix == "teamcity"
