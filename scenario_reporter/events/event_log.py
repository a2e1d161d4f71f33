"""Recorded event logs.

Loads a run's events from a YAML document (a list of event mappings) or a
JSON-lines file (one event mapping per line), so a recorded run can be
replayed through the reporter.

Each record has a ``type`` and an ISO-8601 ``timestamp``; the remaining
fields depend on the type::

    - {type: run_started, timestamp: "2024-05-01T10:00:00Z"}
    - type: source_parsed
      timestamp: "2024-05-01T10:00:00Z"
      uri: file:features/cart.feature
      nodes:
        - {keyword: Feature, name: Cart, line: 1, children: [...]}
    - type: case_started
      timestamp: "2024-05-01T10:00:01Z"
      test_case: {uri: file:features/cart.feature, line: 3, name: Add item}

Records of unknown type are skipped with a warning for forward
compatibility.  Records missing required fields raise ``EventLogError``.
"""

from __future__ import annotations

import base64
import binascii
import datetime
import json
import sys
from pathlib import Path
from typing import Any, Callable

import yaml

from scenario_reporter.events.model import (
    CaseFinished,
    CaseStarted,
    Embed,
    Event,
    GenericStep,
    HookStep,
    HookType,
    Location,
    Node,
    PickleStep,
    Result,
    RunFinished,
    RunStarted,
    SnippetsSuggested,
    SourceParsed,
    Status,
    StepFinished,
    StepStarted,
    Suggestion,
    TestCase,
    TestStep,
    Write,
)

YAML_SUFFIXES = (".yaml", ".yml")


class EventLogError(ValueError):
    """A recorded event log could not be read."""


def _require(record: dict[str, Any], key: str) -> Any:
    if key not in record or record[key] is None:
        raise EventLogError(f"missing required field '{key}'")
    return record[key]


def _optional_text(record: dict[str, Any], key: str) -> str | None:
    # Unquoted YAML scalars may load as bools or numbers
    value = record.get(key)
    return None if value is None else str(value)


def _parse_instant(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        instant = value
    else:
        text = str(value)
        # fromisoformat only accepts a trailing Z from Python 3.11 on
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            instant = datetime.datetime.fromisoformat(text)
        except ValueError:
            raise EventLogError(f"invalid timestamp '{value}'")
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=datetime.timezone.utc)
    return instant


def _parse_location(record: dict[str, Any], prefix: str = "") -> Location:
    return Location(
        line=int(_require(record, f"{prefix}line")),
        column=int(record.get(f"{prefix}column", 0) or 0),
    )


def _parse_node(record: dict[str, Any]) -> Node:
    return Node(
        location=_parse_location(record),
        keyword=_optional_text(record, "keyword"),
        name=_optional_text(record, "name"),
        children=tuple(_parse_node(child) for child in record.get("children") or []),
    )


def _parse_test_case(record: dict[str, Any]) -> TestCase:
    data = _require(record, "test_case")
    return TestCase(
        uri=str(_require(data, "uri")),
        location=_parse_location(data),
        name=str(data.get("name", "")),
        id=str(data.get("id", "")),
    )


def _parse_test_step(record: dict[str, Any]) -> TestStep:
    data = _require(record, "test_step")
    kind = data.get("kind", "pickle")
    if kind == "pickle":
        return PickleStep(
            uri=str(_require(data, "uri")),
            line=int(_require(data, "line")),
            text=str(_require(data, "text")),
            code_location=str(data.get("code_location", "")),
        )
    if kind == "hook":
        hook_type = str(_require(data, "hook_type")).upper()
        try:
            return HookStep(
                hook_type=HookType[hook_type],
                code_location=str(data.get("code_location", "")),
            )
        except KeyError:
            raise EventLogError(f"unknown hook type '{hook_type}'")
    if kind == "generic":
        return GenericStep(code_location=str(data.get("code_location", "")))
    raise EventLogError(f"unknown step kind '{kind}'")


def _parse_result(record: dict[str, Any]) -> Result:
    data = record.get("result") or {"status": "PASSED"}
    status = str(_require(data, "status")).upper()
    try:
        parsed_status = Status[status]
    except KeyError:
        raise EventLogError(f"unknown status '{status}'")
    return Result(
        status=parsed_status,
        duration=datetime.timedelta(milliseconds=float(data.get("duration_ms", 0))),
        error=data.get("error"),
    )


def _parse_data(record: dict[str, Any]) -> bytes:
    try:
        return base64.b64decode(str(record.get("data", "")), validate=True)
    except binascii.Error as e:
        raise EventLogError(f"embed data is not valid base64: {e}")


def _run_started(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return RunStarted(instant=instant)


def _source_parsed(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return SourceParsed(
        instant=instant,
        uri=str(_require(record, "uri")),
        nodes=tuple(_parse_node(node) for node in record.get("nodes") or []),
    )


def _case_started(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return CaseStarted(instant=instant, test_case=_parse_test_case(record))


def _step_started(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return StepStarted(
        instant=instant,
        test_case=_parse_test_case(record),
        test_step=_parse_test_step(record),
    )


def _step_finished(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return StepFinished(
        instant=instant,
        test_case=_parse_test_case(record),
        test_step=_parse_test_step(record),
        result=_parse_result(record),
    )


def _case_finished(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return CaseFinished(
        instant=instant,
        test_case=_parse_test_case(record),
        result=_parse_result(record),
    )


def _run_finished(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return RunFinished(instant=instant, result=_parse_result(record))


def _snippets_suggested(record: dict[str, Any], instant: datetime.datetime) -> Event:
    suggestion = _require(record, "suggestion")
    return SnippetsSuggested(
        instant=instant,
        uri=str(_require(record, "uri")),
        test_case_location=_parse_location(record, "test_case_"),
        step_location=Location(
            line=int(record.get("step_line", 0) or 0),
            column=int(record.get("step_column", 0) or 0),
        ),
        suggestion=Suggestion(
            step=str(suggestion.get("step", "")),
            snippets=tuple(str(s) for s in suggestion.get("snippets") or []),
        ),
    )


def _embed(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return Embed(
        instant=instant,
        test_case=_parse_test_case(record),
        data=_parse_data(record),
        media_type=str(_require(record, "media_type")),
        name=_optional_text(record, "name"),
    )


def _write(record: dict[str, Any], instant: datetime.datetime) -> Event:
    return Write(
        instant=instant,
        test_case=_parse_test_case(record),
        text=str(_require(record, "text")),
    )


_PARSERS: dict[str, Callable[[dict[str, Any], datetime.datetime], Event]] = {
    "run_started": _run_started,
    "source_parsed": _source_parsed,
    "case_started": _case_started,
    "step_started": _step_started,
    "step_finished": _step_finished,
    "case_finished": _case_finished,
    "run_finished": _run_finished,
    "snippets_suggested": _snippets_suggested,
    "embed": _embed,
    "write": _write,
}


def parse_record(record: Any) -> Event | None:
    """Convert one event mapping into an event.

    Returns:
        The event, or ``None`` if the record's type is unknown.

    Raises:
        EventLogError: If the record is malformed.
    """
    if not isinstance(record, dict):
        raise EventLogError("event record is not a mapping")
    event_type = _require(record, "type")
    if not isinstance(event_type, str):
        raise EventLogError(f"event type must be a string, got {event_type!r}")
    parser = _PARSERS.get(event_type)
    if parser is None:
        return None
    instant = _parse_instant(_require(record, "timestamp"))
    try:
        return parser(record, instant)
    except (AttributeError, TypeError, ValueError) as e:
        raise EventLogError(f"malformed '{event_type}' record: {e}")


def parse_records(records: list[Any]) -> list[Event]:
    """Convert event mappings to events, in order.

    Raises:
        EventLogError: Naming the 1-based number of the first bad record.
    """
    events: list[Event] = []
    for number, record in enumerate(records, start=1):
        try:
            event = parse_record(record)
        except EventLogError as e:
            raise EventLogError(f"record {number}: {e}")
        if event is None:
            print(
                f"event log: skipping record {number} with unknown type "
                f"'{record.get('type')}'",
                file=sys.stderr,
            )
            continue
        events.append(event)
    return events


def _read_records(path: Path) -> list[Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except UnicodeDecodeError as e:
        raise EventLogError(f"{path} is not valid UTF-8: {e}")
    except OSError as e:
        raise EventLogError(f"cannot read {path}: {e.strerror or e}")
    if path.suffix in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise EventLogError(f"invalid YAML in {path}: {e}")
        if data is None:
            return []
        if not isinstance(data, list):
            raise EventLogError(f"{path} must contain a list of events")
        return data

    records: list[Any] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise EventLogError(f"invalid JSON on line {number} of {path}: {e}")
    return records


def load_event_log(path: Path) -> list[Event]:
    """Load every event recorded in *path*.

    Args:
        path: A ``.yaml``/``.yml`` file holding a list of events, or a
            JSON-lines file.

    Returns:
        Events in recorded order.

    Raises:
        FileNotFoundError: If *path* does not exist.
        EventLogError: If the log is malformed.
    """
    return parse_records(_read_records(path))
