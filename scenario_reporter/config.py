"""Reporter configuration file management.

Reads and writes the JSON file holding the service-message prefix and the
fixed names the reporter uses for run-level and synthetic markers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "prefix": "teamcity",
    "run_name": "Cucumber",
    "location_scheme": "test",
    "fixture_failure_name": "Before All/After All",
    "progress_category": "Scenarios",
}


class ReporterConfig:
    """Manages the reporter's JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            data = json.loads(text)
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            self._data = dict(DEFAULT_CONFIG)

    def save(self) -> None:
        """Write config to the file."""
        if self.path is None:
            raise ValueError("No config file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
            f.write("\n")

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    @property
    def prefix(self) -> str:
        """Get the service-message prefix written after ``##``."""
        return str(self._data.get("prefix", DEFAULT_CONFIG["prefix"]))

    @property
    def run_name(self) -> str:
        """Get the name of the suite wrapping the whole run."""
        return str(self._data.get("run_name", DEFAULT_CONFIG["run_name"]))

    @property
    def location_scheme(self) -> str:
        """Get the scheme of resolved glue code location hints."""
        return str(
            self._data.get("location_scheme", DEFAULT_CONFIG["location_scheme"])
        )

    @property
    def fixture_failure_name(self) -> str:
        """Get the name of the synthetic test reporting fixture failures."""
        return str(
            self._data.get(
                "fixture_failure_name",
                DEFAULT_CONFIG["fixture_failure_name"],
            )
        )

    @property
    def progress_category(self) -> str:
        """Get the tests category announced when counting starts."""
        return str(
            self._data.get(
                "progress_category",
                DEFAULT_CONFIG["progress_category"],
            )
        )

    def set_config(
        self,
        prefix: str | None = None,
        run_name: str | None = None,
        location_scheme: str | None = None,
        fixture_failure_name: str | None = None,
        progress_category: str | None = None,
    ) -> None:
        """Update configuration values; ``None`` leaves a value unchanged."""
        updates = {
            "prefix": prefix,
            "run_name": run_name,
            "location_scheme": location_scheme,
            "fixture_failure_name": fixture_failure_name,
            "progress_category": progress_category,
        }
        for key, value in updates.items():
            if value is not None:
                self._data[key] = value
