"""Breadth-first augmenting-path search over the implicit residual graph."""

from __future__ import annotations

from collections import deque

import numpy as np

from .data import FlowEdge, FlowNetwork


class AugmentingPathFinder:
    """Finds shortest augmenting paths with breadth-first search.

    Each call to :meth:`search` rebuilds the predecessor-edge tree and the
    ``marked`` bitmap from scratch. The search always explores every vertex
    reachable from the source rather than stopping at the sink, so after the
    last (failing) search ``marked`` is exactly the source side of a minimum
    cut.

    Breadth-first order keeps every augmenting path a shortest one, which bounds
    the number of augmentations by O(V * E) (Edmonds-Karp).

    Attributes:
        network: Network whose edges are searched. Read only.
        tolerance: Residual capacities at or below this are treated as zero.
        edge_to: Vertex -> edge through which it was first reached.
        marked: Boolean array, True for vertices reached by the last search.
    """

    def __init__(self, network: FlowNetwork, tolerance: float = 0.0):
        self.network = network
        self.tolerance = tolerance
        self.edge_to: list[FlowEdge | None] = [None] * network.vertex_count
        self.marked = np.zeros(network.vertex_count, dtype=bool)
        self._source: int | None = None

    def search(self, source: int, sink: int) -> bool:
        """Run one BFS from ``source``; return True when ``sink`` was reached."""
        vertex_count = self.network.vertex_count
        self.edge_to = [None] * vertex_count
        self.marked = np.zeros(vertex_count, dtype=bool)
        self._source = source

        queue: deque[int] = deque([source])
        self.marked[source] = True
        while queue:
            vertex = queue.popleft()
            for edge in self.network.adjacent_edges(vertex):
                other = edge.other(vertex)
                if not self.marked[other] and edge.residual_capacity_to(other) > self.tolerance:
                    self.edge_to[other] = edge
                    self.marked[other] = True
                    queue.append(other)
        return bool(self.marked[sink])

    def has_path_to(self, vertex: int) -> bool:
        return bool(self.marked[vertex])

    def path_edges(self, target: int) -> list[FlowEdge]:
        """Edges of the search-tree path ending at ``target``, listed target-first."""
        edges: list[FlowEdge] = []
        vertex = target
        while vertex != self._source:
            edge = self.edge_to[vertex]
            if edge is None:
                return []
            edges.append(edge)
            vertex = edge.other(vertex)
        return edges

    def path_vertices(self, target: int) -> list[int]:
        """Vertices of the search-tree path from the source to ``target``."""
        if self._source is None or not self.marked[target]:
            return []
        vertices = [target]
        vertex = target
        for edge in self.path_edges(target):
            vertex = edge.other(vertex)
            vertices.append(vertex)
        vertices.reverse()
        return vertices

    def reachable(self) -> set[int]:
        """Vertices marked by the last search."""
        return {int(vertex) for vertex in np.flatnonzero(self.marked)}
