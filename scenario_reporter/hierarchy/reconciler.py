"""Suite hierarchy reconciliation between consecutive test cases.

The event stream only says "a test case started" or "the run finished".
The reconciler remembers which suites (structural nodes from the feature
file) are currently open and, for each new test case, closes and opens
just enough suites to arrive at that case's path.  Ancestors shared by
consecutive cases stay open, so sibling scenarios appear under a single
feature/rule suite instead of one suite per scenario.

Open/close markers always nest: suites are closed innermost first and
opened outermost first, and every opened suite is closed by the end of the
run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from scenario_reporter.encoding.messages import ServiceMessages
from scenario_reporter.encoding.steps import error_details
from scenario_reporter.events.model import Error, Node, TestCase
from scenario_reporter.hierarchy.nodes import PathLookup, suite_name


@dataclass
class ReconcilerState:
    """Suites currently open (root first) and the running test case."""

    current_path: list[Node] = field(default_factory=list)
    active_case: TestCase | None = None


def common_prefix_length(current: list[Node], new: list[Node]) -> int:
    """Number of leading nodes *current* and *new* share.

    Comparison starts at the root and stops at the first differing node or
    at the end of the shorter path.
    """
    length = 0
    for current_node, new_node in zip(current, new):
        if current_node != new_node:
            break
        length += 1
    return length


def popped_nodes(current: list[Node], new: list[Node]) -> list[Node]:
    """Nodes of *current* to close before *new* can be opened, innermost first."""
    shared = common_prefix_length(current, new)
    return list(reversed(current[shared:]))


def pushed_nodes(current: list[Node], new: list[Node]) -> list[Node]:
    """Nodes of *new* to open after closing, outermost first."""
    shared = common_prefix_length(current, new)
    return list(new[shared:])


class HierarchyReconciler:
    """Tracks open suites and produces the markers that move between them.

    Each operation returns the lines to write, in order.  The reconciler is
    not safe for concurrent use; callers must feed it one event at a time.
    """

    def __init__(
        self,
        messages: ServiceMessages,
        path_lookup: PathLookup,
    ) -> None:
        self.messages = messages
        self.path_lookup = path_lookup
        self.state = ReconcilerState()

    @property
    def current_path(self) -> list[Node]:
        return list(self.state.current_path)

    @property
    def active_case(self) -> TestCase | None:
        return self.state.active_case

    def run_started(self, timestamp: str) -> list[str]:
        return [
            self.messages.entered_the_matrix(timestamp),
            self.messages.run_started(timestamp),
            self.messages.counting_started(timestamp),
        ]

    def case_started(self, test_case: TestCase, timestamp: str) -> list[str]:
        """Move the open suites to *test_case*'s path and announce the case.

        A case whose location cannot be found in its parsed document gets
        an empty path and is reported without any suites around it.
        """
        new_path = self.path_lookup(test_case.uri, test_case.location) or []

        lines = [
            self._finish_node(timestamp, node)
            for node in popped_nodes(self.state.current_path, new_path)
        ]
        lines.extend(
            self._start_node(test_case.uri, timestamp, node)
            for node in pushed_nodes(self.state.current_path, new_path)
        )
        self.state.current_path = list(new_path)
        self.state.active_case = test_case

        lines.append(self.messages.case_progress_started(timestamp))
        return lines

    def case_finished(self, timestamp: str) -> list[str]:
        """Close the finished case's own suite; its ancestors stay open."""
        lines = [self.messages.case_progress_finished(timestamp)]
        if self.state.current_path:
            leaf = self.state.current_path.pop()
            lines.append(self._finish_node(timestamp, leaf))
        self.state.active_case = None
        return lines

    def run_finished(self, error: Error | None, timestamp: str) -> list[str]:
        """Close every open suite, report fixture failures and end the run."""
        lines = [self.messages.counting_finished(timestamp)]
        lines.extend(
            self._finish_node(timestamp, node)
            for node in popped_nodes(self.state.current_path, [])
        )
        self.state.current_path = []

        if error is not None:
            lines.extend(
                self.messages.fixture_failure(timestamp, error_details(error))
            )
        lines.append(self.messages.run_finished(timestamp))
        return lines

    def _start_node(self, uri: str, timestamp: str, node: Node) -> str:
        location = f"{uri}:{node.location.line}"
        return self.messages.suite_started(timestamp, location, suite_name(node))

    def _finish_node(self, timestamp: str, node: Node) -> str:
        return self.messages.suite_finished(timestamp, suite_name(node))
