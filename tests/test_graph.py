"""Tests for luminal.core.graph – layered puzzle graph generation."""

from __future__ import annotations

import math
import random

import pytest

from luminal.core.errors import InvalidParameterError
from luminal.core.graph import VALUE_RANGES, find_path, generate_pattern
from luminal.core.models import Difficulty, Node, NodeType


def _by_type(nodes: list[Node], node_type: NodeType) -> list[Node]:
    return [n for n in nodes if n.node_type is node_type]


# ---------------------------------------------------------------------------
# Shape and connectivity, across sizes and difficulties
# ---------------------------------------------------------------------------

class TestGraphShape:
    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_node_count_and_terminals(self, difficulty: Difficulty):
        rng = random.Random(11)
        for complexity in range(2, 33):
            nodes = generate_pattern(complexity, difficulty, rng)
            assert len(nodes) == complexity + 1
            assert len(_by_type(nodes, NodeType.START)) == 1
            assert len(_by_type(nodes, NodeType.GOAL)) == 1

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_goal_reachable_from_start(self, difficulty: Difficulty):
        rng = random.Random(5)
        for complexity in range(2, 33):
            nodes = generate_pattern(complexity, difficulty, rng)
            start = _by_type(nodes, NodeType.START)[0]
            goal = _by_type(nodes, NodeType.GOAL)[0]
            path = find_path(nodes, start.id, goal.id)
            assert path is not None
            assert path[0] == start.id
            assert path[-1] == goal.id

    def test_no_dangling_connections(self):
        rng = random.Random(8)
        for complexity in (2, 6, 12, 32):
            nodes = generate_pattern(complexity, Difficulty.EXPERT, rng)
            ids = {n.id for n in nodes}
            for node in nodes:
                assert set(node.connections) <= ids
                assert node.id not in node.connections

    def test_ids_are_unique(self):
        nodes = generate_pattern(30, Difficulty.HARD, random.Random(2))
        assert len({n.id for n in nodes}) == len(nodes)

    def test_terminal_positions_and_values(self):
        nodes = generate_pattern(6, Difficulty.MEDIUM, random.Random(1))
        start, goal = nodes[0], nodes[-1]
        assert start.node_type is NodeType.START
        assert (start.x, start.y, start.value) == (0.5, 0.1, 0)
        assert goal.node_type is NodeType.GOAL
        assert (goal.x, goal.y, goal.value) == (0.5, 0.9, 100)
        assert goal.connections == ()

    def test_intermediate_rows(self):
        complexity = 8
        nodes = generate_pattern(complexity, Difficulty.EASY, random.Random(4))
        for i, node in enumerate(nodes[1:-1], start=1):
            assert node.y == pytest.approx(0.1 + (i / complexity) * 0.7)
            assert 0.2 <= node.x <= 0.8

    def test_intermediate_values_in_type_ranges(self):
        rng = random.Random(21)
        for _ in range(20):
            for node in generate_pattern(15, Difficulty.EXPERT, rng)[1:-1]:
                low, high = VALUE_RANGES[node.node_type]
                assert low <= node.value <= high

    def test_minimum_complexity(self):
        nodes = generate_pattern(2, Difficulty.EASY, random.Random(0))
        assert nodes[0].node_type is NodeType.START
        assert nodes[-1].node_type is NodeType.GOAL
        assert len(nodes) == 3


# ---------------------------------------------------------------------------
# Edge rules
# ---------------------------------------------------------------------------

class TestEdges:
    def test_backbone_links_each_node_to_the_next(self):
        nodes = generate_pattern(20, Difficulty.HARD, random.Random(9))
        for current, nxt in zip(nodes, nodes[1:]):
            assert current.connections[0] == nxt.id

    def test_skip_edges_respect_distance(self):
        rng = random.Random(13)
        for _ in range(20):
            nodes = generate_pattern(5, Difficulty.EASY, rng)
            for i in range(len(nodes) - 2):
                a, b = nodes[i], nodes[i + 2]
                close = math.hypot(a.x - b.x, a.y - b.y) < 0.5
                assert (b.id in a.connections) == close

    def test_small_graphs_have_no_side_paths(self):
        rng = random.Random(17)
        for complexity in range(2, 6):
            nodes = generate_pattern(complexity, Difficulty.EXPERT, rng)
            for i, node in enumerate(nodes):
                allowed = {n.id for n in nodes[i + 1:i + 3]}
                assert set(node.connections) <= allowed

    def test_side_paths_match_lateral_rule(self):
        rng = random.Random(23)
        for _ in range(20):
            nodes = generate_pattern(30, Difficulty.MEDIUM, rng)
            for i, node in enumerate(nodes[1:-1], start=1):
                for j in range(i + 3, len(nodes)):
                    other = nodes[j]
                    lateral = abs(node.y - other.y) < 0.15 and abs(node.x - other.x) > 0.2
                    assert (other.id in node.connections) == lateral

    def test_start_node_has_no_side_paths(self):
        rng = random.Random(31)
        for _ in range(20):
            nodes = generate_pattern(30, Difficulty.EASY, rng)
            assert set(nodes[0].connections) <= {nodes[1].id, nodes[2].id}

    def test_graph_is_acyclic_in_order(self):
        nodes = generate_pattern(25, Difficulty.EXPERT, random.Random(3))
        position = {n.id: i for i, n in enumerate(nodes)}
        for i, node in enumerate(nodes):
            assert all(position[c] > i for c in node.connections)

    def test_connections_have_no_duplicates(self):
        rng = random.Random(37)
        for _ in range(20):
            for node in generate_pattern(30, Difficulty.HARD, rng):
                assert len(node.connections) == len(set(node.connections))


# ---------------------------------------------------------------------------
# Randomness and difficulty
# ---------------------------------------------------------------------------

class TestRandomSource:
    def test_same_seed_same_graph(self):
        a = generate_pattern(12, Difficulty.HARD, random.Random(42))
        b = generate_pattern(12, Difficulty.HARD, random.Random(42))
        assert a == b

    def test_different_seed_different_graph(self):
        a = generate_pattern(12, Difficulty.HARD, random.Random(1))
        b = generate_pattern(12, Difficulty.HARD, random.Random(2))
        assert a != b

    def test_default_source_works(self):
        assert len(generate_pattern(4)) == 5

    def test_harder_difficulty_places_more_obstacles(self):
        def obstacles(difficulty: Difficulty) -> int:
            rng = random.Random(99)
            return sum(
                len(_by_type(generate_pattern(20, difficulty, rng), NodeType.OBSTACLE))
                for _ in range(100)
            )

        assert obstacles(Difficulty.EASY) < obstacles(Difficulty.MEDIUM) < obstacles(Difficulty.EXPERT)

    def test_accepts_difficulty_value_string(self):
        nodes = generate_pattern(4, "expert", random.Random(0))
        assert len(nodes) == 5


# ---------------------------------------------------------------------------
# Invalid input
# ---------------------------------------------------------------------------

class TestInvalidComplexity:
    @pytest.mark.parametrize("complexity", [1, 0, -3])
    def test_below_two_rejected(self, complexity: int):
        with pytest.raises(InvalidParameterError, match="complexity"):
            generate_pattern(complexity, Difficulty.EASY)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidParameterError):
            generate_pattern(3.5, Difficulty.EASY)  # type: ignore[arg-type]

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            generate_pattern(1)


# ---------------------------------------------------------------------------
# find_path
# ---------------------------------------------------------------------------

class TestFindPath:
    def _line(self) -> list[Node]:
        return [
            Node(id="a", x=0.5, y=0.1, node_type=NodeType.START, connections=("b",)),
            Node(id="b", x=0.5, y=0.5, node_type=NodeType.CHECKPOINT, value=20, connections=("c",)),
            Node(id="c", x=0.5, y=0.9, node_type=NodeType.GOAL, value=100),
        ]

    def test_follows_connections(self):
        assert find_path(self._line(), "a", "c") == ["a", "b", "c"]

    def test_same_source_and_target(self):
        assert find_path(self._line(), "b", "b") == ["b"]

    def test_no_backwards_path(self):
        assert find_path(self._line(), "c", "a") is None

    def test_unknown_ids(self):
        assert find_path(self._line(), "a", "zzz") is None
        assert find_path(self._line(), "zzz", "a") is None
