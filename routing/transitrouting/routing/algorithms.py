import logging
from dataclasses import dataclass, field
from typing import List, Optional

import networkx as nx

logger = logging.getLogger(__name__)


@dataclass
class PathResult:
    """Minimum-weight path as an ordered list of edge ids"""
    total_weight: float
    edge_ids: List[int] = field(default_factory=list)
    vertices: List[int] = field(default_factory=list)


class ShortestPathEngine:
    """
    Dijkstra search over a directed multigraph with non-negative weights.

    Edges are identified by their multigraph key. The engine only reads the
    graph, so queries are independent of each other.
    """

    def __init__(self, graph: nx.MultiDiGraph, weight: str = 'weight'):
        self.graph = graph
        self.weight = weight

    def find_path(self, source: int, target: int) -> Optional[PathResult]:
        """Return the lightest path from source to target, or None if unreachable"""
        if source not in self.graph or target not in self.graph:
            logger.debug(f"Vertex {source} or {target} not in graph")
            return None
        try:
            length, path = nx.single_source_dijkstra(self.graph, source, target, weight=self.weight)
        except nx.NetworkXNoPath:
            logger.debug(f"No path exists between vertices {source} and {target}")
            return None

        edge_ids = [self._lightest_edge(u, v) for u, v in zip(path[:-1], path[1:])]
        return PathResult(total_weight=length, edge_ids=edge_ids, vertices=path)

    def _lightest_edge(self, u: int, v: int) -> int:
        # Dijkstra relaxed u->v through the cheapest parallel edge
        parallel = self.graph[u][v]
        return min(parallel, key=lambda key: parallel[key][self.weight])
