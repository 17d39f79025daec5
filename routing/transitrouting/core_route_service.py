"""
Route service: itinerary routing and the query facade over one transit network
"""

import logging
import time
from typing import List, Optional

from .catalogue.transit_network import TransitNetwork
from .exceptions import InvalidConfigurationError
from .graph.graph_builder import RouteGraph, RouteGraphBuilder
from .logger import logger as catalogue_logger
from .models.domain import ErrorKind, LineStatistics, RoutingSettings
from .models.route_segments import ItineraryResult
from .rendering.map_renderer import MapRenderer
from .routing.algorithms import ShortestPathEngine
from .routing.itinerary import ItineraryComposer


class TransportRouter:
    """
    Answers fastest-itinerary queries over a finalized transit network.

    The routing graph is built once in the constructor; invalid routing
    settings fail here, before any query can be served.
    """

    def __init__(self, network: TransitNetwork, settings: RoutingSettings):
        self.network = network
        self.settings = settings
        self.logger = logging.getLogger(__name__)

        self.route_graph: RouteGraph = RouteGraphBuilder(settings).build(network)
        self.engine = ShortestPathEngine(self.route_graph.graph)
        self.composer = ItineraryComposer(self.route_graph.edges)

    def build_itinerary(self, from_stop: str, to_stop: str) -> ItineraryResult:
        """Fastest itinerary between two stops, or the reason there is none"""
        origin = self.network.find_stop(from_stop)
        destination = self.network.find_stop(to_stop)
        if origin is None or destination is None:
            self.logger.debug(f"Unknown stop in route request: {from_stop} -> {to_stop}")
            return ItineraryResult.failed(ErrorKind.NOT_FOUND)

        source = self.route_graph.wait_vertex.get(origin.handle)
        target = self.route_graph.wait_vertex.get(destination.handle)
        if source is None or target is None:
            # Stop exists but no bus line serves it
            return ItineraryResult.failed(ErrorKind.NO_ROUTE)

        path = self.engine.find_path(source, target)
        if path is None:
            return ItineraryResult.failed(ErrorKind.NO_ROUTE)
        return ItineraryResult.found(self.composer.compose(path.edge_ids))


class RequestHandler:
    """Facade combining statistics, map rendering and itinerary queries"""

    def __init__(self, network: TransitNetwork, renderer: Optional[MapRenderer] = None,
                 router: Optional[TransportRouter] = None):
        self.network = network
        self.renderer = renderer
        self.router = router

    @classmethod
    def create(cls, network: TransitNetwork, routing_settings: Optional[RoutingSettings] = None,
               renderer: Optional[MapRenderer] = None) -> 'RequestHandler':
        router = TransportRouter(network, routing_settings) if routing_settings is not None else None
        return cls(network, renderer=renderer, router=router)

    def get_line_statistics(self, name: str) -> Optional[LineStatistics]:
        return self.network.get_line_statistics(name)

    def get_buses_serving_stop(self, name: str) -> Optional[List[str]]:
        return self.network.get_buses_serving_stop(name)

    def render_map(self) -> str:
        if self.renderer is None:
            raise InvalidConfigurationError("Render settings are required for map requests")
        return self.renderer.render(self.network)

    def build_itinerary(self, from_stop: str, to_stop: str) -> ItineraryResult:
        if self.router is None:
            raise InvalidConfigurationError("Routing settings are required for route requests")
        start = time.time()
        result = self.router.build_itinerary(from_stop, to_stop)
        catalogue_logger.log_route_request(from_stop, to_stop, (time.time() - start) * 1000,
                                           result.is_found)
        return result

