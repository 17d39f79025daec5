from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .domain import ErrorKind


class LegKind(Enum):
    WAIT = 'Wait'
    RIDE = 'Ride'


@dataclass(frozen=True)
class EdgeDescriptor:
    """Metadata attached to one routing graph edge"""
    kind: LegKind
    name: str  # stop name for WAIT, bus line name for RIDE
    duration: float
    span_count: int = 0


@dataclass(frozen=True)
class WaitLeg:
    """Waiting for a bus at a stop"""
    stop_name: str
    duration: float


@dataclass(frozen=True)
class RideLeg:
    """Riding one bus line across `span_count` stop-to-stop hops"""
    line_name: str
    span_count: int
    duration: float


Leg = Union[WaitLeg, RideLeg]


@dataclass
class Itinerary:
    """Complete itinerary with all legs in travel order"""
    legs: List[Leg] = field(default_factory=list)

    @property
    def total_time(self) -> float:
        return sum(leg.duration for leg in self.legs)


@dataclass
class ItineraryResult:
    """Either an itinerary or the reason none could be built"""
    itinerary: Optional[Itinerary] = None
    error: Optional[ErrorKind] = None

    @property
    def is_found(self) -> bool:
        return self.itinerary is not None

    @classmethod
    def found(cls, itinerary: Itinerary) -> 'ItineraryResult':
        return cls(itinerary=itinerary)

    @classmethod
    def failed(cls, error: ErrorKind) -> 'ItineraryResult':
        return cls(error=error)
