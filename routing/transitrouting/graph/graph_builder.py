import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

import networkx as nx

from ..catalogue.transit_network import TransitNetwork
from ..exceptions import GraphBuildError, InvalidConfigurationError
from ..models.domain import RoutingSettings
from ..models.route_segments import EdgeDescriptor, LegKind

METERS_IN_KM = 1000.0
MINUTES_IN_HOUR = 60.0

logger = logging.getLogger(__name__)


@dataclass
class RouteGraph:
    """
    Frozen routing graph plus the lookups needed to query it.

    Every edge is stored under its edge id as the multigraph key, and
    `edges[edge_id]` holds its metadata.
    """
    graph: nx.MultiDiGraph
    wait_vertex: Dict[int, int] = field(default_factory=dict)   # stop handle -> vertex id
    board_vertex: Dict[int, int] = field(default_factory=dict)  # stop handle -> vertex id
    edges: List[EdgeDescriptor] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return len(self.edges)


def validate_routing_settings(settings: RoutingSettings):
    """Reject settings that would produce undefined or negative weights"""
    velocity = settings.bus_velocity
    if not isinstance(velocity, (int, float)) or not math.isfinite(velocity) or velocity <= 0:
        raise InvalidConfigurationError(f"Bus velocity must be positive, got {velocity!r}")
    wait_time = settings.bus_wait_time
    if not isinstance(wait_time, (int, float)) or not math.isfinite(wait_time) or wait_time < 0:
        raise InvalidConfigurationError(f"Bus wait time must not be negative, got {wait_time!r}")


def compute_travel_time(distance_meters: float, velocity_kmh: float) -> float:
    """Ride duration in minutes"""
    return (distance_meters / METERS_IN_KM) / velocity_kmh * MINUTES_IN_HOUR


class RouteGraphBuilder:
    """Builds the wait/board routing graph for a finalized transit network"""

    def __init__(self, settings: RoutingSettings):
        validate_routing_settings(settings)
        self.settings = settings

    def build(self, network: TransitNetwork) -> RouteGraph:
        """Build the routing graph; the result is frozen"""
        route_graph = RouteGraph(graph=nx.MultiDiGraph())
        try:
            stop_handles = self._collect_unique_stops(network)
            self._add_vertices_and_wait_edges(network, stop_handles, route_graph)
            ride_edges = self._add_ride_edges(network, route_graph)
        except (KeyError, IndexError) as e:
            raise GraphBuildError(f"Failed to build routing graph: {e}") from e

        nx.freeze(route_graph.graph)

        logger.info(f"Route graph built: {route_graph.vertex_count} vertices, {route_graph.edge_count} edges")
        logger.info(f"Created {len(stop_handles)} wait edges and {ride_edges} ride edges")
        kind_counter = Counter(edge.kind.value for edge in route_graph.edges)
        logger.debug(f"Edge counts by kind: {dict(kind_counter)}")
        return route_graph

    def _collect_unique_stops(self, network: TransitNetwork) -> List[int]:
        """Stops referenced by any bus line, in first-seen order"""
        seen = {}
        for line in network.bus_lines():
            for handle in line.stops:
                seen.setdefault(handle, None)
        return list(seen)

    def _add_vertices_and_wait_edges(self, network: TransitNetwork, stop_handles: List[int],
                                     route_graph: RouteGraph):
        wait_time = float(self.settings.bus_wait_time)
        for handle in stop_handles:
            wait_id = 2 * len(route_graph.wait_vertex)
            board_id = wait_id + 1
            route_graph.wait_vertex[handle] = wait_id
            route_graph.board_vertex[handle] = board_id
            route_graph.graph.add_node(wait_id, stop=handle, role='wait')
            route_graph.graph.add_node(board_id, stop=handle, role='board')

            stop_name = network.stop(handle).name
            self._add_edge(route_graph, wait_id, board_id,
                           EdgeDescriptor(kind=LegKind.WAIT, name=stop_name, duration=wait_time))

    def _add_ride_edges(self, network: TransitNetwork, route_graph: RouteGraph) -> int:
        """One edge per (i, j) pair with i < j on each line, so riding never incurs a wait"""
        velocity = float(self.settings.bus_velocity)
        ride_edges = 0
        for line in network.bus_lines():
            stops = line.stops
            if not stops:
                logger.warning(f"Bus line {line.name} has no known stops, skipping")
                continue
            logger.debug(f"Processing bus line {line.name}: {len(stops)} stops")

            for i in range(len(stops)):
                board_id = route_graph.board_vertex[stops[i]]
                total_distance = 0.0
                for j in range(i + 1, len(stops)):
                    total_distance += network.distance_between(stops[j - 1], stops[j])
                    time = compute_travel_time(total_distance, velocity)
                    self._add_edge(route_graph, board_id, route_graph.wait_vertex[stops[j]],
                                   EdgeDescriptor(kind=LegKind.RIDE, name=line.name,
                                                  duration=time, span_count=j - i))
                    ride_edges += 1
        return ride_edges

    @staticmethod
    def _add_edge(route_graph: RouteGraph, u: int, v: int, descriptor: EdgeDescriptor):
        edge_id = len(route_graph.edges)
        route_graph.edges.append(descriptor)
        route_graph.graph.add_edge(u, v, key=edge_id, weight=descriptor.duration)


def build_route_graph(network: TransitNetwork, settings: RoutingSettings) -> RouteGraph:
    """Validate settings and build the routing graph in one call"""
    return RouteGraphBuilder(settings).build(network)
