"""Tests for bipartite matching via unit-capacity max-flow."""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from flow_solver import (  # noqa: E402
    StructuralError,
    build_matching_network,
    solve_bipartite_matching,
)


def test_network_layout():
    matching = build_matching_network(2, 3, [(0, 2), (1, 0)])

    assert matching.network.vertex_count == 7
    assert (matching.source, matching.sink) == (5, 6)
    assert all(edge.capacity == 1 for edge in matching.network.edges())
    assert sorted(matching.pair_edges.values()) == [(0, 2), (1, 0)]
    for edge_id, (left, right) in matching.pair_edges.items():
        edge = matching.network.edge(edge_id)
        assert (edge.tail, edge.head) == (left, 2 + right)


def test_four_left_vertices():
    # Left 0 and 1 both only like right 0, so one of them stays unmatched.
    pairs = [(0, 0), (1, 0), (2, 1), (2, 2), (3, 2)]
    result = solve_bipartite_matching(4, 3, pairs)

    assert result.size == 3
    assert result.flow_result.max_flow_value == pytest.approx(3.0)
    assert {left for left, _ in result.pairs} == result.matched_left
    assert len({right for _, right in result.pairs}) == result.size
    assert result.matched_left & {0, 1} in ({0}, {1})
    assert {2, 3} <= result.matched_left


def test_augmenting_path_rematches():
    result = solve_bipartite_matching(2, 2, [(0, 0), (0, 1), (1, 0)])
    assert result.size == 2
    assert result.pairs == [(0, 1), (1, 0)]


def test_perfect_matching():
    pairs = [(i, j) for i in range(4) for j in range(4)]
    result = solve_bipartite_matching(4, 4, pairs)

    assert result.size == 4
    assert result.matched_left == {0, 1, 2, 3}


def test_no_pairs():
    result = solve_bipartite_matching(3, 3, [])
    assert result.size == 0
    assert result.pairs == []
    assert result.matched_left == set()


def test_duplicate_pairs_match_once():
    result = solve_bipartite_matching(1, 1, [(0, 0), (0, 0)])
    assert result.size == 1
    assert result.pairs == [(0, 0)]


@pytest.mark.parametrize("pair", [(4, 0), (0, -1), (0, 3)])
def test_pair_out_of_range(pair):
    with pytest.raises(StructuralError):
        build_matching_network(4, 3, [pair])


def test_negative_partition_size():
    with pytest.raises(StructuralError):
        build_matching_network(-1, 2, [])
