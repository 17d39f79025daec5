"""
Line-oriented command format.

Base requests::

    Stop Tolstopaltsevo: 55.611087, 37.20829, 3900m to Marushkino
    Bus 256: Biryulyovo Zapadnoye > Biryusinka > Biryulyovo Zapadnoye
    Bus 750: Tolstopaltsevo - Marushkino - Rasskazovka

`>` separates the stops of a round trip as written; `-` separates the stops
of a linear line that is driven there and back. Stat requests are
`Bus <name>` or `Stop <name>`.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, TextIO

from ..catalogue.transit_network import TransitNetwork
from ..exceptions import RequestFormatError
from ..models.domain import Coordinates

logger = logging.getLogger(__name__)

DISTANCE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)m to (.+?)\s*$')


@dataclass
class CommandDescription:
    command: str
    id: str
    description: str


def parse_command(line: str) -> Optional[CommandDescription]:
    """Split `Command id: description`; returns None for lines that do not match"""
    command, sep, rest = line.strip().partition(' ')
    if not sep:
        return None
    name, colon, description = rest.partition(':')
    name = name.strip()
    if not colon or not name:
        return None
    return CommandDescription(command=command, id=name, description=description)


def split(text: str, delimiter: str) -> List[str]:
    return [part.strip() for part in text.split(delimiter) if part.strip()]


def parse_coordinates(description: str) -> Coordinates:
    parts = split(description, ',')
    if len(parts) < 2:
        raise RequestFormatError(f"Stop description needs latitude and longitude: {description!r}")
    try:
        return Coordinates(lat=float(parts[0]), lng=float(parts[1]))
    except ValueError as e:
        raise RequestFormatError(f"Bad coordinates in {description!r}") from e


def parse_distances(description: str) -> Dict[str, float]:
    distances = {}
    for part in split(description, ',')[2:]:
        match = DISTANCE_PATTERN.match(part)
        if match:
            distances[match.group(2)] = float(match.group(1))
        else:
            logger.warning(f"Ignoring malformed distance entry {part!r}")
    return distances


def parse_route(description: str):
    """Stop names and the round-trip flag of a bus description"""
    if '>' in description:
        return split(description, '>'), True
    return split(description, '-'), False


class InputReader:
    """Collects base commands and applies them to a network in phase order"""

    def __init__(self):
        self.commands: List[CommandDescription] = []

    def parse_line(self, line: str):
        command = parse_command(line)
        if command is not None:
            self.commands.append(command)
        elif line.strip():
            logger.warning(f"Ignoring unparseable line {line.strip()!r}")

    def apply_commands(self, network: TransitNetwork):
        stops = [c for c in self.commands if c.command == 'Stop']
        buses = [c for c in self.commands if c.command == 'Bus']

        for command in stops:
            network.add_stop(command.id, parse_coordinates(command.description))

        for command in stops:
            for neighbor, meters in parse_distances(command.description).items():
                network.set_distance(command.id, neighbor, meters)

        for command in buses:
            stop_names, is_round_trip = parse_route(command.description)
            network.add_bus_line(command.id, stop_names, is_round_trip)

        logger.info(f"Applied {len(stops)} stop and {len(buses)} bus commands")


def read_base_requests(lines: Iterable[str], network: TransitNetwork):
    reader = InputReader()
    for line in lines:
        reader.parse_line(line)
    reader.apply_commands(network)


# ---------------------------------------------------------------------------
#  Stat output
# ---------------------------------------------------------------------------
def format_bus_info(network: TransitNetwork, name: str) -> str:
    stats = network.get_line_statistics(name)
    # A line whose stops were all unknown reads as missing
    if stats is None or stats.stop_count == 0:
        return f"Bus {name}: not found"
    return (f"Bus {name}: {stats.stop_count} stops on route, "
            f"{stats.unique_stop_count} unique stops, "
            f"{stats.route_length:g} route length, "
            f"{stats.curvature:.5f} curvature")


def format_stop_info(network: TransitNetwork, name: str) -> str:
    buses = network.get_buses_serving_stop(name)
    if buses is None:
        return f"Stop {name}: not found"
    if not buses:
        return f"Stop {name}: no buses"
    return f"Stop {name}: buses {' '.join(buses)}"


def format_stat(network: TransitNetwork, request: str) -> str:
    request_type, sep, name = request.strip().partition(' ')
    if not sep:
        return "Invalid request"
    if request_type == 'Bus':
        return format_bus_info(network, name.strip())
    if request_type == 'Stop':
        return format_stop_info(network, name.strip())
    return "Invalid request"


def read_stat_requests(lines: Iterable[str], network: TransitNetwork, output: TextIO):
    for line in lines:
        if line.strip():
            output.write(format_stat(network, line) + '\n')


def process_text(stream: TextIO, network: TransitNetwork, output: TextIO):
    """
    Counted sections: a base request count and that many lines, then a stat
    request count and that many lines.
    """
    lines = iter(stream.read().splitlines())
    try:
        base_count = int(next(lines).strip())
        read_base_requests([next(lines) for _ in range(base_count)], network)
        stat_count = int(next(lines).strip())
        read_stat_requests([next(lines) for _ in range(stat_count)], network, output)
    except (StopIteration, ValueError) as e:
        raise RequestFormatError("Truncated or malformed text input") from e
