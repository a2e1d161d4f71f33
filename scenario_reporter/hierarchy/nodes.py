"""Structural tree lookups.

The trees themselves come from an external parser via ``SourceParsed``
events.  This module only stores them per document and answers "which
root-to-node path leads to this location" queries.
"""

from __future__ import annotations

from typing import Callable, Iterable

from scenario_reporter.events.model import Location, Node

# Resolves the suite path of a test case from its document URI and location.
PathLookup = Callable[[str, Location], "list[Node] | None"]


def find_path(
    nodes: Iterable[Node],
    predicate: Callable[[Node], bool],
) -> list[Node] | None:
    """Find the path to the first node matching *predicate*.

    Top-level nodes are searched in order; each is searched depth first.

    Args:
        nodes: Top-level nodes of one parsed document.
        predicate: Test applied to each candidate node.

    Returns:
        Nodes from the top-level node down to and including the match,
        or ``None`` if no node matches.
    """
    for node in nodes:
        path = node.find_path_to(predicate)
        if path is not None:
            return path
    return None


def suite_name(node: Node) -> str:
    """Display name of the suite a node opens."""
    if node.name:
        return node.name
    if node.keyword:
        return node.keyword
    return "Unknown"


class SourceIndex:
    """Parsed documents keyed by URI.

    A document parsed twice keeps only its latest tree.
    """

    def __init__(self) -> None:
        self._sources: dict[str, tuple[Node, ...]] = {}

    def add(self, uri: str, nodes: Iterable[Node]) -> None:
        self._sources[uri] = tuple(nodes)

    def __contains__(self, uri: object) -> bool:
        return uri in self._sources

    def path_to(self, uri: str, location: Location) -> list[Node] | None:
        """Return the path to the node at *location* in document *uri*.

        Returns ``None`` when the document was never parsed or no node
        sits at that location.
        """
        nodes = self._sources.get(uri)
        if nodes is None:
            return None
        return find_path(nodes, lambda candidate: candidate.location == location)
