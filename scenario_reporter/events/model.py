"""Event payload types for scenario test runs.

Every event the reporter understands is an immutable dataclass carrying an
``instant``.  The host delivers them one at a time, strictly in the order
they happened; the reporter dispatches on the concrete type.
"""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, field
from typing import Callable, Union


@dataclass(frozen=True)
class Location:
    """Line/column coordinate inside a source document."""

    line: int
    column: int = 0


@dataclass(frozen=True)
class Node:
    """A node of a parsed source document's structural tree.

    Features, rules, scenario outlines, example tables and scenarios are all
    nodes.  Equality covers keyword, name and location only: two nodes are
    the same suite when both their coordinates and their identifying
    content match.  Children never take part in the comparison.
    """

    location: Location
    keyword: str | None = None
    name: str | None = None
    children: tuple[Node, ...] = field(default=(), compare=False, repr=False)

    def find_path_to(self, predicate: Callable[[Node], bool]) -> list[Node] | None:
        """Return the root-to-node path of the first node matching *predicate*.

        The search is depth first, checking a node before its children.
        Returns ``None`` when nothing in this subtree matches.
        """
        if predicate(self):
            return [self]
        for child in self.children:
            sub_path = child.find_path_to(predicate)
            if sub_path is not None:
                return [self] + sub_path
        return None


@dataclass(frozen=True)
class TestCase:
    """An executed test case (a scenario or one example row)."""

    __test__ = False  # not a pytest test class

    uri: str
    location: Location
    name: str = ""
    id: str = ""


class Status(enum.Enum):
    """Outcome of a finished step, case or run."""

    PASSED = "PASSED"
    SKIPPED = "SKIPPED"
    PENDING = "PENDING"
    UNDEFINED = "UNDEFINED"
    AMBIGUOUS = "AMBIGUOUS"
    FAILED = "FAILED"


class HookType(enum.Enum):
    BEFORE = "BEFORE"
    AFTER = "AFTER"
    BEFORE_STEP = "BEFORE_STEP"
    AFTER_STEP = "AFTER_STEP"
    BEFORE_ALL = "BEFORE_ALL"
    AFTER_ALL = "AFTER_ALL"


@dataclass(frozen=True)
class PickleStep:
    """A concrete step of a test case with a known source line."""

    uri: str
    line: int
    text: str
    code_location: str = ""


@dataclass(frozen=True)
class HookStep:
    """A before/after hook; only its glue code location is known."""

    hook_type: HookType
    code_location: str


@dataclass(frozen=True)
class GenericStep:
    """Any other kind of step a host may report."""

    code_location: str


TestStep = Union[PickleStep, HookStep, GenericStep]

# Errors are exceptions when reported in-process and plain strings when
# replayed from a recorded event log.
Error = Union[BaseException, str]


@dataclass(frozen=True)
class Result:
    status: Status
    duration: datetime.timedelta = datetime.timedelta(0)
    error: Error | None = None


@dataclass(frozen=True)
class Suggestion:
    """Candidate implementation snippets for one undefined step."""

    step: str
    snippets: tuple[str, ...] = ()


@dataclass(frozen=True)
class RunStarted:
    instant: datetime.datetime


@dataclass(frozen=True)
class SourceParsed:
    """A source document was parsed into its top-level structural nodes."""

    instant: datetime.datetime
    uri: str
    nodes: tuple[Node, ...]


@dataclass(frozen=True)
class CaseStarted:
    instant: datetime.datetime
    test_case: TestCase


@dataclass(frozen=True)
class StepStarted:
    instant: datetime.datetime
    test_case: TestCase
    test_step: TestStep


@dataclass(frozen=True)
class StepFinished:
    instant: datetime.datetime
    test_case: TestCase
    test_step: TestStep
    result: Result


@dataclass(frozen=True)
class CaseFinished:
    instant: datetime.datetime
    test_case: TestCase
    result: Result


@dataclass(frozen=True)
class RunFinished:
    instant: datetime.datetime
    result: Result


@dataclass(frozen=True)
class SnippetsSuggested:
    instant: datetime.datetime
    uri: str
    test_case_location: Location
    step_location: Location
    suggestion: Suggestion


@dataclass(frozen=True)
class Embed:
    """Binary attachment produced while a test case ran."""

    instant: datetime.datetime
    test_case: TestCase
    data: bytes
    media_type: str
    name: str | None = None


@dataclass(frozen=True)
class Write:
    """Text written by a test case."""

    instant: datetime.datetime
    test_case: TestCase
    text: str


Event = Union[
    RunStarted,
    SourceParsed,
    CaseStarted,
    StepStarted,
    StepFinished,
    CaseFinished,
    RunFinished,
    SnippetsSuggested,
    Embed,
    Write,
]
