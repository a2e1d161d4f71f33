"""Tests for structural tree lookups."""

from __future__ import annotations

from scenario_reporter.events.model import Location, Node
from scenario_reporter.hierarchy.nodes import SourceIndex, find_path, suite_name

URI = "file:features/cart.feature"

EXAMPLE_A = Node(Location(9, 7), "Example", "")
EXAMPLE_B = Node(Location(10, 7), "Example", "")
EXAMPLES = Node(Location(8, 5), "Examples", "", (EXAMPLE_A, EXAMPLE_B))
OUTLINE = Node(Location(5, 3), "Scenario Outline", "Add items", (EXAMPLES,))
SCENARIO = Node(Location(3, 3), "Scenario", "Empty cart")
FEATURE = Node(Location(1, 1), "Feature", "Cart", (SCENARIO, OUTLINE))
OTHER_FEATURE = Node(Location(1, 1), "Feature", "Checkout")


def _at(line: int, column: int):
    return lambda node: node.location == Location(line, column)


class TestNodeEquality:
    """Tests for node identity used in path comparison."""

    def test_children_ignored(self):
        """Nodes with the same keyword, name and location are equal."""
        assert Node(Location(1, 1), "Feature", "Cart") == FEATURE

    def test_location_matters(self):
        """Identical content at another location is a different node."""
        assert Node(Location(2, 1), "Feature", "Cart") != FEATURE

    def test_name_matters(self):
        """Different content at the same location is a different node."""
        assert OTHER_FEATURE != FEATURE

    def test_hashable(self):
        assert len({FEATURE, Node(Location(1, 1), "Feature", "Cart")}) == 1


class TestFindPath:
    """Tests for find_path() and Node.find_path_to()."""

    def test_top_level_match(self):
        assert find_path([FEATURE], _at(1, 1)) == [FEATURE]

    def test_nested_match(self):
        """The path runs from the top-level node down to the match."""
        assert find_path([FEATURE], _at(10, 7)) == [FEATURE, OUTLINE, EXAMPLES, EXAMPLE_B]

    def test_no_match(self):
        assert find_path([FEATURE], _at(99, 1)) is None

    def test_empty_document(self):
        assert find_path([], _at(1, 1)) is None

    def test_first_top_level_match_wins(self):
        """Top-level nodes are searched in order."""
        assert find_path([OTHER_FEATURE, FEATURE], _at(1, 1)) == [OTHER_FEATURE]


class TestSuiteName:
    """Tests for suite_name()."""

    def test_name(self):
        assert suite_name(FEATURE) == "Cart"

    def test_keyword_fallback(self):
        """Unnamed nodes are named after their keyword."""
        assert suite_name(EXAMPLES) == "Examples"

    def test_unknown(self):
        assert suite_name(Node(Location(1))) == "Unknown"


class TestSourceIndex:
    """Tests for SourceIndex."""

    def test_path_to(self):
        index = SourceIndex()
        index.add(URI, [FEATURE])
        assert index.path_to(URI, Location(3, 3)) == [FEATURE, SCENARIO]
        assert URI in index

    def test_unparsed_document(self):
        """Documents never parsed have no paths."""
        assert SourceIndex().path_to(URI, Location(3, 3)) is None

    def test_location_not_found(self):
        index = SourceIndex()
        index.add(URI, [FEATURE])
        assert index.path_to(URI, Location(3, 4)) is None

    def test_reparse_replaces_tree(self):
        index = SourceIndex()
        index.add(URI, [FEATURE])
        index.add(URI, [OTHER_FEATURE])
        assert index.path_to(URI, Location(3, 3)) is None
        assert index.path_to(URI, Location(1, 1)) == [OTHER_FEATURE]
