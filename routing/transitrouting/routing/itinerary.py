from typing import Iterable, List

from ..models.route_segments import EdgeDescriptor, Itinerary, Leg, LegKind, RideLeg, WaitLeg


def edge_to_leg(edge: EdgeDescriptor) -> Leg:
    if edge.kind is LegKind.WAIT:
        return WaitLeg(stop_name=edge.name, duration=edge.duration)
    return RideLeg(line_name=edge.name, span_count=edge.span_count, duration=edge.duration)


class ItineraryComposer:
    """Translates a path of edge ids into wait/ride legs, preserving order"""

    def __init__(self, edges: List[EdgeDescriptor]):
        self.edges = edges

    def compose(self, edge_ids: Iterable[int]) -> Itinerary:
        return Itinerary(legs=[edge_to_leg(self.edges[edge_id]) for edge_id in edge_ids])
