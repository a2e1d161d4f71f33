"""Snippet suggestions for undefined steps.

Suggestions arrive as separate events before the undefined step finishes.
They are kept for the whole run and looked up by the test case they were
suggested for.
"""

from __future__ import annotations

from scenario_reporter.events.model import Location, SnippetsSuggested, Suggestion


class SuggestionStore:
    """Append-only record of suggested snippets."""

    def __init__(self) -> None:
        self._events: list[SnippetsSuggested] = []

    def add(self, event: SnippetsSuggested) -> None:
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def for_test_case(self, uri: str, location: Location) -> list[Suggestion]:
        """Suggestions recorded for the test case at *uri* and *location*."""
        return [
            event.suggestion
            for event in self._events
            if event.uri == uri and event.test_case_location == location
        ]

    def message_for(self, uri: str, location: Location) -> str:
        return create_message(self.for_test_case(uri, location))


def create_message(suggestions: list[Suggestion]) -> str:
    """Explain how to implement the undefined steps of a test case.

    Returns an empty string when nothing was suggested.  Snippets shared by
    several steps are listed once, in first-seen order.
    """
    if not suggestions:
        return ""
    text = "You can implement this step"
    if len(suggestions) > 1:
        text += f" and {len(suggestions) - 1} other step(s)"
    text += " using the snippet(s) below:\n\n"

    distinct: list[str] = []
    for suggestion in suggestions:
        for snippet in suggestion.snippets:
            if snippet not in distinct:
                distinct.append(snippet)
    return text + "\n".join(distinct) + "\n"
