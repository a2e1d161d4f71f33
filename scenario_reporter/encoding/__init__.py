"""Service message encoding: escaping, markers, steps and snippets."""

from scenario_reporter.encoding.messages import (
    ServiceMessages,
    duration_millis,
    escape,
    format_timestamp,
    service_message,
)
from scenario_reporter.encoding.snippets import SuggestionStore, create_message
from scenario_reporter.encoding.steps import (
    resolve_code_location,
    step_finished_lines,
    step_location,
    step_name,
)

__all__ = [
    "ServiceMessages",
    "SuggestionStore",
    "create_message",
    "duration_millis",
    "escape",
    "format_timestamp",
    "resolve_code_location",
    "service_message",
    "step_finished_lines",
    "step_location",
    "step_name",
]
