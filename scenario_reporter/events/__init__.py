"""Test run events: payload types and recorded event logs."""

from scenario_reporter.events.event_log import EventLogError, load_event_log, parse_records
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
    Write,
)

__all__ = [
    "CaseFinished",
    "CaseStarted",
    "Embed",
    "Event",
    "EventLogError",
    "GenericStep",
    "HookStep",
    "HookType",
    "Location",
    "Node",
    "PickleStep",
    "Result",
    "RunFinished",
    "RunStarted",
    "SnippetsSuggested",
    "SourceParsed",
    "Status",
    "StepFinished",
    "StepStarted",
    "Suggestion",
    "TestCase",
    "Write",
    "load_event_log",
    "parse_records",
]
