"""TeamCity service message reporter for scenario test runs.

Feed events to :meth:`ServiceMessagePlugin.handle` in the order they
happened.  Hierarchy events (run/case start and finish) go through the
:class:`HierarchyReconciler`; step, attachment and write events are encoded
directly.  Every produced line is written to the output sink immediately.

The markers are meant for TeamCity and IntelliJ, which use them to attach
console output to individual test cases, so printing to stdout alongside
other output is intentional.
"""

from __future__ import annotations

import sys
import threading
from typing import IO, Iterable

from scenario_reporter.config import ReporterConfig
from scenario_reporter.encoding.messages import ServiceMessages, format_timestamp
from scenario_reporter.encoding.snippets import SuggestionStore
from scenario_reporter.encoding.steps import step_finished_lines, step_location, step_name
from scenario_reporter.events.model import (
    CaseFinished,
    CaseStarted,
    Embed,
    Event,
    RunFinished,
    RunStarted,
    SnippetsSuggested,
    SourceParsed,
    Status,
    StepFinished,
    StepStarted,
    Write,
)
from scenario_reporter.hierarchy.nodes import PathLookup, SourceIndex
from scenario_reporter.hierarchy.reconciler import HierarchyReconciler


# Events whose markers carry a timestamp
_TIMESTAMPED_EVENTS = (
    RunStarted,
    CaseStarted,
    StepStarted,
    StepFinished,
    CaseFinished,
    RunFinished,
)


class ConcurrentHandlingError(RuntimeError):
    """Raised when events are handled from two call paths at once."""


class ServiceMessagePlugin:
    """Writes TeamCity service messages for a stream of test events.

    One instance reports one run.  Hierarchy state is not safe for parallel
    mutation, so a second ``handle`` call made while one is in progress
    (from another thread or re-entrantly from the sink) is rejected with
    :class:`ConcurrentHandlingError`.
    """

    def __init__(
        self,
        out: IO[str] | None = None,
        config: ReporterConfig | None = None,
        path_lookup: PathLookup | None = None,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.config = config if config is not None else ReporterConfig()
        self.messages = ServiceMessages(self.config)
        self.sources = SourceIndex()
        self.suggestions = SuggestionStore()
        self.reconciler = HierarchyReconciler(
            self.messages,
            path_lookup if path_lookup is not None else self.sources.path_to,
        )
        self._lock = threading.Lock()

    def handle(self, event: Event) -> None:
        """Report a single event.

        Raises:
            ConcurrentHandlingError: If another event is being handled.
        """
        if not self._lock.acquire(blocking=False):
            raise ConcurrentHandlingError(
                f"{type(event).__name__} delivered while another event is "
                "being handled; events must be delivered one at a time"
            )
        try:
            self._print(self._dispatch(event))
        finally:
            self._lock.release()

    def handle_all(self, events: Iterable[Event]) -> None:
        for event in events:
            self.handle(event)

    def _dispatch(self, event: Event) -> list[str]:
        """Lines for *event*; events of unknown types produce none."""
        if isinstance(event, SourceParsed):
            self.sources.add(event.uri, event.nodes)
            return []
        if isinstance(event, SnippetsSuggested):
            self.suggestions.add(event)
            return []
        if isinstance(event, Embed):
            name = "" if event.name is None else event.name + " "
            return [self.messages.output(
                f"Embed event: {name}[{event.media_type} {len(event.data)} bytes]\n"
            )]
        if isinstance(event, Write):
            return [self.messages.output(f"Write event:\n{event.text}\n")]
        if not isinstance(event, _TIMESTAMPED_EVENTS):
            return []

        timestamp = format_timestamp(event.instant)

        if isinstance(event, RunStarted):
            return self.reconciler.run_started(timestamp)
        if isinstance(event, CaseStarted):
            return self.reconciler.case_started(event.test_case, timestamp)
        if isinstance(event, StepStarted):
            location = step_location(event.test_step, self.config.location_scheme)
            name = step_name(event.test_step)
            return [self.messages.test_started(timestamp, location, name)]
        if isinstance(event, StepFinished):
            snippets = ""
            if event.result.status is Status.UNDEFINED:
                snippets = self._snippets_for_active_case()
            return step_finished_lines(
                self.messages, timestamp, event.test_step, event.result, snippets,
            )
        if isinstance(event, CaseFinished):
            return self.reconciler.case_finished(timestamp)
        return self.reconciler.run_finished(event.result.error, timestamp)

    def _snippets_for_active_case(self) -> str:
        test_case = self.reconciler.active_case
        if test_case is None:
            return ""
        return self.suggestions.message_for(test_case.uri, test_case.location)

    def _print(self, lines: list[str]) -> None:
        if not lines:
            return
        for line in lines:
            self.out.write(line + "\n")
        self.out.flush()
