"""
Transit network: stops, bus lines and directed road distances
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..models.domain import BusLine, Coordinates, LineStatistics, Stop
from ..utils.geo_utils import path_length

logger = logging.getLogger(__name__)


def expand_stop_sequence(stops: Sequence, is_round_trip: bool) -> list:
    """Full traversal order: A,B,C -> A,B,C,B,A unless the line is a round trip"""
    stops = list(stops)
    if is_round_trip:
        return stops
    return stops + stops[-2::-1]


class TransitNetwork:
    """
    In-memory store for stops, bus lines and road distances.

    Stops and lines live in contiguous lists and are referenced by integer
    handles; names resolve to handles through dictionaries. The network is
    filled during ingestion and then only read.
    """

    def __init__(self):
        self._stops: List[Stop] = []
        self._stops_by_name: Dict[str, int] = {}
        self._bus_lines: List[BusLine] = []
        self._bus_lines_by_name: Dict[str, int] = {}
        self._distances: Dict[Tuple[int, int], float] = {}

    # ------------------------------------------------------------------
    #  Ingestion
    # ------------------------------------------------------------------
    def add_stop(self, name: str, coordinates: Coordinates) -> Stop:
        """Add a stop, or update the coordinates of an existing one"""
        handle = self._stops_by_name.get(name)
        if handle is not None:
            stop = self._stops[handle]
            stop.coordinates = coordinates
            logger.debug(f"Stop {name} re-added, coordinates updated")
            return stop
        stop = Stop(handle=len(self._stops), name=name, coordinates=coordinates)
        self._stops.append(stop)
        self._stops_by_name[name] = stop.handle
        return stop

    def add_bus_line(self, name: str, stop_names: Sequence[str], is_round_trip: bool) -> BusLine:
        """Add a bus line; unknown stop names are skipped"""
        handles = []
        for stop_name in stop_names:
            handle = self._stops_by_name.get(stop_name)
            if handle is None:
                logger.warning(f"Stop {stop_name} not found for bus line {name}, skipping")
                continue
            handles.append(handle)

        expanded = expand_stop_sequence(handles, is_round_trip)

        existing = self._bus_lines_by_name.get(name)
        if existing is not None:
            for handle in self._bus_lines[existing].stops:
                self._stops[handle].bus_lines.discard(name)
            line_handle = existing
        else:
            line_handle = len(self._bus_lines)

        line = BusLine(
            handle=line_handle,
            name=name,
            stops=expanded,
            is_round_trip=is_round_trip,
            original_stop_count=len(handles),
        )
        if existing is not None:
            self._bus_lines[existing] = line
        else:
            self._bus_lines.append(line)
            self._bus_lines_by_name[name] = line_handle

        for handle in expanded:
            self._stops[handle].bus_lines.add(name)
        return line

    def set_distance(self, from_stop: str, to_stop: str, meters: float) -> bool:
        """Set the directed road distance; returns False if a stop is unknown"""
        from_handle = self._stops_by_name.get(from_stop)
        to_handle = self._stops_by_name.get(to_stop)
        if from_handle is None or to_handle is None:
            logger.warning(f"Distance {from_stop} -> {to_stop} references an unknown stop, skipping")
            return False
        self._distances[(from_handle, to_handle)] = float(meters)
        return True

    # ------------------------------------------------------------------
    #  Lookups
    # ------------------------------------------------------------------
    def find_stop(self, name: str) -> Optional[Stop]:
        handle = self._stops_by_name.get(name)
        return self._stops[handle] if handle is not None else None

    def find_bus_line(self, name: str) -> Optional[BusLine]:
        handle = self._bus_lines_by_name.get(name)
        return self._bus_lines[handle] if handle is not None else None

    def stop(self, handle: int) -> Stop:
        return self._stops[handle]

    def stops(self) -> Iterator[Stop]:
        return iter(self._stops)

    def bus_lines(self) -> Iterator[BusLine]:
        return iter(self._bus_lines)

    def stop_names(self, line: BusLine) -> List[str]:
        return [self._stops[handle].name for handle in line.stops]

    def get_distance(self, from_stop: str, to_stop: str) -> float:
        """Directed distance, falling back to the reverse pair, else 0"""
        from_handle = self._stops_by_name.get(from_stop)
        to_handle = self._stops_by_name.get(to_stop)
        if from_handle is None or to_handle is None:
            return 0.0
        return self.distance_between(from_handle, to_handle)

    def distance_between(self, from_handle: int, to_handle: int) -> float:
        distance = self._distances.get((from_handle, to_handle))
        if distance is not None:
            return distance
        return self._distances.get((to_handle, from_handle), 0.0)

    # ------------------------------------------------------------------
    #  Statistics
    # ------------------------------------------------------------------
    def get_line_statistics(self, name: str) -> Optional[LineStatistics]:
        """Statistics for a bus line, or None if the line is unknown"""
        line = self.find_bus_line(name)
        if line is None:
            return None

        route_length = sum((
            self.distance_between(a, b) for a, b in zip(line.stops, line.stops[1:])
        ), 0.0)
        coordinates = [
            (self._stops[h].coordinates.lat, self._stops[h].coordinates.lng) for h in line.stops
        ]
        return LineStatistics(
            stop_count=len(line.stops),
            unique_stop_count=len(set(line.stops)),
            route_length=route_length,
            geographic_length=path_length(coordinates),
        )

    def get_buses_serving_stop(self, name: str) -> Optional[List[str]]:
        """Sorted names of lines serving a stop, or None if the stop is unknown"""
        stop = self.find_stop(name)
        if stop is None:
            return None
        return sorted(stop.bus_lines)

    def __len__(self) -> int:
        return len(self._stops)
