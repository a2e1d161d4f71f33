"""TeamCity service message formatting.

Every line has the form ``##teamcity[name key='value' ...]``.  Values are
escaped with TeamCity's ``|`` escapes before substitution so that quotes,
brackets and line breaks in names, messages and stack traces cannot break
the surrounding message.
"""

from __future__ import annotations

import datetime
from typing import Any

from scenario_reporter.config import ReporterConfig

# Applied in order; "|" must come first so later escapes are not doubled.
_ESCAPES = (
    ("|", "||"),
    ("'", "|'"),
    ("\n", "|n"),
    ("\r", "|r"),
    ("[", "|["),
    ("]", "|]"),
)


def escape(value: Any) -> str:
    """Escape a value for use inside a quoted service message attribute.

    ``None`` renders as the empty string.
    """
    if value is None:
        return ""
    text = str(value)
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


def service_message(prefix: str, name: str, /, **attributes: Any) -> str:
    """Render one service message line.

    Args:
        prefix: Text following ``##``, normally ``teamcity``.
        name: Message name, e.g. ``testStarted``.
        **attributes: Attribute values in output order; each is escaped.

    Returns:
        The formatted line without a trailing newline.
    """
    parts = [name]
    parts.extend(f"{key}='{escape(value)}'" for key, value in attributes.items())
    return f"##{prefix}[{' '.join(parts)}]"


def format_timestamp(instant: datetime.datetime) -> str:
    """Format an instant as ``yyyy-MM-dd'T'hh:mm:ss.SSSZ`` in UTC.

    The hour is the 12-hour clock hour (01-12) and the zone is rendered as
    ``+0000``.  Naive datetimes are taken to already be in UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=datetime.timezone.utc)
    utc = instant.astimezone(datetime.timezone.utc)
    millis = utc.microsecond // 1000
    return (
        utc.strftime("%Y-%m-%dT%I:%M:%S")
        + f".{millis:03d}"
        + utc.strftime("%z")
    )


def duration_millis(duration: datetime.timedelta) -> int:
    """Whole milliseconds of *duration*, sub-millisecond part dropped."""
    return duration // datetime.timedelta(milliseconds=1)


class ServiceMessages:
    """Builds the fixed set of markers the reporter emits.

    Holds the configured prefix and names; every method returns one
    formatted line.
    """

    def __init__(self, config: ReporterConfig | None = None) -> None:
        self.config = config if config is not None else ReporterConfig()

    def _line(self, name: str, /, **attributes: Any) -> str:
        return service_message(self.config.prefix, name, **attributes)

    # -- run level ---------------------------------------------------------

    def entered_the_matrix(self, timestamp: str) -> str:
        return self._line("enteredTheMatrix", timestamp=timestamp)

    def run_started(self, timestamp: str) -> str:
        return self._line(
            "testSuiteStarted", timestamp=timestamp, name=self.config.run_name,
        )

    def run_finished(self, timestamp: str) -> str:
        return self._line(
            "testSuiteFinished", timestamp=timestamp, name=self.config.run_name,
        )

    def counting_started(self, timestamp: str) -> str:
        return self._line(
            "customProgressStatus",
            testsCategory=self.config.progress_category,
            count="0",
            timestamp=timestamp,
        )

    def counting_finished(self, timestamp: str) -> str:
        return self._line(
            "customProgressStatus", testsCategory="", count="0", timestamp=timestamp,
        )

    def case_progress_started(self, timestamp: str) -> str:
        return self._line(
            "customProgressStatus", type="testStarted", timestamp=timestamp,
        )

    def case_progress_finished(self, timestamp: str) -> str:
        return self._line(
            "customProgressStatus", type="testFinished", timestamp=timestamp,
        )

    # -- suites ------------------------------------------------------------

    def suite_started(self, timestamp: str, location_hint: str, name: str) -> str:
        return self._line(
            "testSuiteStarted",
            timestamp=timestamp,
            locationHint=location_hint,
            name=name,
        )

    def suite_finished(self, timestamp: str, name: str) -> str:
        return self._line("testSuiteFinished", timestamp=timestamp, name=name)

    # -- steps -------------------------------------------------------------

    def test_started(self, timestamp: str, location_hint: str, name: str) -> str:
        return self._line(
            "testStarted",
            timestamp=timestamp,
            locationHint=location_hint,
            captureStandardOutput="true",
            name=name,
        )

    def test_finished(self, timestamp: str, duration: int, name: str) -> str:
        return self._line(
            "testFinished", timestamp=timestamp, duration=duration, name=name,
        )

    def test_failed(
        self,
        timestamp: str,
        duration: int,
        message: str | None,
        details: str | None,
        name: str,
    ) -> str:
        return self._line(
            "testFailed",
            timestamp=timestamp,
            duration=duration,
            message=message,
            details=details,
            name=name,
        )

    def test_ignored(
        self, timestamp: str, duration: int, message: str | None, name: str,
    ) -> str:
        return self._line(
            "testIgnored",
            timestamp=timestamp,
            duration=duration,
            message=message,
            name=name,
        )

    # -- fixture failures ----------------------------------------------------

    def fixture_failure(self, timestamp: str, details: str) -> list[str]:
        """Placeholder test carrying a before-all/after-all failure.

        The protocol has no notion of failures outside a test, so the error
        is attached to a synthetic started/failed/finished triple.
        """
        name = self.config.fixture_failure_name
        return [
            self._line("testStarted", timestamp=timestamp, name=name),
            self._line(
                "testFailed",
                timestamp=timestamp,
                message=f"{name} failed",
                details=details,
                name=name,
            ),
            self._line("testFinished", timestamp=timestamp, name=name),
        ]

    # -- attachments -------------------------------------------------------

    def output(self, text: str) -> str:
        return self._line("message", text=text, status="NORMAL")
