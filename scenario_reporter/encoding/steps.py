"""Step naming, location hints and result status mapping."""

from __future__ import annotations

import re
import traceback

from scenario_reporter.encoding.messages import ServiceMessages, duration_millis
from scenario_reporter.events.model import (
    Error,
    HookStep,
    HookType,
    PickleStep,
    Result,
    Status,
    TestStep,
)

# ``pkg.Steps.method(java.lang.String)``: a method reference, no ``:`` in args
ANNOTATION_CODE_LOCATION_PATTERN = re.compile(r"(.*)\.(.*)\([^:]*\)")
# ``pkg.Steps.lambda$0(Steps.java:42)``: a lambda with an embedded file:line
LAMBDA_CODE_LOCATION_PATTERN = re.compile(r"(.*)\.(.*)\(.*:.*\)")

HOOK_NAMES = {
    HookType.BEFORE: "Before",
    HookType.AFTER: "After",
    HookType.BEFORE_STEP: "BeforeStep",
    HookType.AFTER_STEP: "AfterStep",
}


def resolve_code_location(code_location: str, scheme: str = "test") -> str:
    """Turn a glue code location into a navigable location hint.

    Method references resolve to ``<scheme>://<declaring type>/<method>``.
    Lambda references resolve to ``<scheme>://<declaring type>/<simple
    type name>`` since the lambda itself has no navigable name.  Anything
    else is returned unchanged.
    """
    match = ANNOTATION_CODE_LOCATION_PATTERN.fullmatch(code_location)
    if match:
        declaring_type, member = match.group(1), match.group(2)
        return f"{scheme}://{declaring_type}/{member}"

    match = LAMBDA_CODE_LOCATION_PATTERN.fullmatch(code_location)
    if match:
        declaring_type = match.group(1)
        simple_name = declaring_type.rsplit(".", 1)[-1]
        return f"{scheme}://{declaring_type}/{simple_name}"

    return code_location


def step_location(step: TestStep, scheme: str = "test") -> str:
    """Location hint for a step: ``uri:line`` or a resolved code location."""
    if isinstance(step, PickleStep):
        return f"{step.uri}:{step.line}"
    return resolve_code_location(getattr(step, "code_location", "") or "", scheme)


def step_name(step: TestStep) -> str:
    if isinstance(step, PickleStep):
        return step.text
    if isinstance(step, HookStep):
        hook_type = step.hook_type
        if hook_type in HOOK_NAMES:
            return HOOK_NAMES[hook_type]
        return hook_type.name.lower()
    return "Unknown step"


def error_message(error: Error | None) -> str | None:
    """Short message of a reported error (``None`` if there is none)."""
    if error is None:
        return None
    return str(error)


def error_details(error: Error | None) -> str:
    """Full description of a reported error including its traceback.

    Exceptions are rendered with their traceback; errors recorded as text
    are already complete and returned as is.
    """
    if error is None:
        return ""
    if isinstance(error, BaseException):
        return "".join(traceback.format_exception(error))
    return str(error)


def step_finished_lines(
    messages: ServiceMessages,
    timestamp: str,
    step: TestStep,
    result: Result,
    snippets: str = "",
) -> list[str]:
    """Lines reporting a finished step.

    A status-specific marker (nothing for passed steps) precedes the
    ``testFinished`` marker that every step gets.

    Args:
        messages: Marker builder.
        timestamp: Formatted event timestamp.
        step: The finished step.
        result: Its result.
        snippets: Snippet text reported as details of undefined steps.

    Returns:
        One or two formatted lines.
    """
    duration = duration_millis(result.duration)
    name = step_name(step)
    error = result.error
    lines: list[str] = []

    if result.status is Status.SKIPPED:
        message = "Step skipped" if error is None else error_message(error)
        lines.append(messages.test_ignored(timestamp, duration, message, name))
    elif result.status is Status.PENDING:
        details = "" if error is None else error_message(error)
        lines.append(
            messages.test_failed(timestamp, duration, "Step pending", details, name)
        )
    elif result.status is Status.UNDEFINED:
        lines.append(
            messages.test_failed(timestamp, duration, "Step undefined", snippets, name)
        )
    elif result.status in (Status.AMBIGUOUS, Status.FAILED):
        lines.append(
            messages.test_failed(
                timestamp, duration, "Step failed", error_details(error), name,
            )
        )

    lines.append(messages.test_finished(timestamp, duration, name))
    return lines
