"""Cycle detection and dependency depth over the internal import graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Set, Tuple

from .models import DependencyEdge

_EXHAUSTED = object()


def build_adjacency(edges: Iterable[DependencyEdge]) -> Dict[str, List[str]]:
    """Adjacency map of internal edges, keyed and ordered by first appearance.

    External edges are dropped: packages terminate the graph.
    """
    graph: Dict[str, List[str]] = {}
    for edge in edges:
        if edge.is_internal:
            graph.setdefault(edge.source, []).append(edge.target)
    return graph


@dataclass(slots=True)
class GraphAnalysis:
    cycles: List[List[str]] = field(default_factory=list)
    dependency_depth: int = 0


class GraphAnalyzer:
    """Traverse the internal dependency graph with explicit stacks.

    Both traversals share one rule: a node is expanded at most once per
    analysis (global visited set), and nodes and neighbors are visited in edge
    insertion order, so results are reproducible for a given edge list.
    """

    def __init__(self, edges: Iterable[DependencyEdge]) -> None:
        self.graph = build_adjacency(edges)

    def analyze(self) -> GraphAnalysis:
        return GraphAnalysis(cycles=self.find_cycles(), dependency_depth=self.dependency_depth())

    def _neighbors(self, node: str) -> Iterator[str]:
        return iter(self.graph.get(node, ()))

    def find_cycles(self) -> List[List[str]]:
        """Return closed walks (first node repeated last), one per back edge.

        Each cycle runs from the first occurrence of the revisited node on the
        current path through the current node. It is the cycle this traversal
        order happens to find, not necessarily the shortest one.
        """
        cycles: List[List[str]] = []
        visited: Set[str] = set()

        for root in self.graph:
            if root in visited:
                continue
            visited.add(root)
            path: List[str] = [root]
            on_path: Set[str] = {root}
            stack: List[Tuple[str, Iterator[str]]] = [(root, self._neighbors(root))]

            while stack:
                node, neighbors = stack[-1]
                neighbor = next(neighbors, _EXHAUSTED)
                if neighbor is _EXHAUSTED:
                    stack.pop()
                    path.pop()
                    on_path.discard(node)
                    continue
                if neighbor in on_path:
                    start = path.index(neighbor)
                    cycles.append(path[start:] + [neighbor])
                    continue
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                on_path.add(neighbor)
                path.append(neighbor)
                stack.append((neighbor, self._neighbors(neighbor)))

        return cycles

    def dependency_depth(self) -> int:
        """Deepest level reached by depth-first walks from each unvisited node.

        Nodes reached by an earlier walk are never revisited, so on diamonds or
        graphs walked from a non-root first this is a lower bound on the
        longest path, not the longest path itself.
        """
        max_depth = 0
        visited: Set[str] = set()

        for root in self.graph:
            if root in visited:
                continue
            visited.add(root)
            stack: List[Tuple[str, int, Iterator[str]]] = [(root, 0, self._neighbors(root))]

            while stack:
                node, depth, neighbors = stack[-1]
                neighbor = next(neighbors, _EXHAUSTED)
                if neighbor is _EXHAUSTED:
                    stack.pop()
                    continue
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                max_depth = max(max_depth, depth + 1)
                stack.append((neighbor, depth + 1, self._neighbors(neighbor)))

        return max_depth
