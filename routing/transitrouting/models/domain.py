import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Set


@dataclass(frozen=True)
class Coordinates:
    """Geographic point in degrees"""
    lat: float
    lng: float


@dataclass
class Stop:
    """Named stop; `handle` is its index in the network's stop store"""
    handle: int
    name: str
    coordinates: Coordinates
    bus_lines: Set[str] = field(default_factory=set)


@dataclass
class BusLine:
    """Bus line with its expanded traversal (stop handles)"""
    handle: int
    name: str
    stops: List[int]
    is_round_trip: bool = False
    original_stop_count: int = 0


@dataclass(frozen=True)
class LineStatistics:
    """Per-line statistics; lengths are in meters"""
    stop_count: int
    unique_stop_count: int
    route_length: float
    geographic_length: float

    @property
    def curvature(self) -> float:
        # Degenerate lines propagate a non-finite value instead of raising
        if self.geographic_length == 0:
            return math.nan if self.route_length == 0 else math.inf
        return self.route_length / self.geographic_length


@dataclass(frozen=True)
class RoutingSettings:
    """Wait time per boarding (minutes) and bus velocity (km/h)"""
    bus_wait_time: float = 0.0
    bus_velocity: float = 0.0


class ErrorKind(Enum):
    """Failure kinds shared between the routing core and its callers"""
    NOT_FOUND = 'not found'
    NO_ROUTE = 'no route'
