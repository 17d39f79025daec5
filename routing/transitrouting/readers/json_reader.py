"""
JSON request processing: network ingestion, settings parsing and stat responses
"""

import json
import logging
import math
import time
from typing import Any, Dict, List, Optional, Tuple

from ..catalogue.transit_network import TransitNetwork
from ..core_route_service import RequestHandler
from ..exceptions import RequestFormatError
from ..logger import logger as catalogue_logger
from ..models.domain import Coordinates, ErrorKind, RoutingSettings
from ..models.route_segments import ItineraryResult, RideLeg, WaitLeg
from ..rendering.map_renderer import MapRenderer, RenderSettings
from ..rendering.svg import Color, Point

logger = logging.getLogger(__name__)

# Request / response keys
TYPE = 'type'
NAME = 'name'
LATITUDE = 'latitude'
LONGITUDE = 'longitude'
ROAD_DISTANCES = 'road_distances'
STOPS = 'stops'
IS_ROUNDTRIP = 'is_roundtrip'
ID = 'id'
FROM = 'from'
TO = 'to'
BUSES = 'buses'
ERROR_MESSAGE = 'error_message'
CURVATURE = 'curvature'
ROUTE_LENGTH = 'route_length'
STOP_COUNT = 'stop_count'
UNIQUE_STOP_COUNT = 'unique_stop_count'
REQUEST_ID = 'request_id'
MAP_KEY = 'map'
TOTAL_TIME = 'total_time'
ITEMS = 'items'
STOP_NAME = 'stop_name'
BUS_KEY = 'bus'
SPAN_COUNT = 'span_count'
TIME = 'time'
BUS_WAIT_TIME = 'bus_wait_time'
BUS_VELOCITY = 'bus_velocity'

# Request types
STOP = 'Stop'
BUS = 'Bus'
MAP = 'Map'
ROUTE = 'Route'
WAIT = 'Wait'

# Both unknown stops and missing routes answer with this message
NOT_FOUND = ErrorKind.NOT_FOUND.value

PendingDistance = Tuple[str, str, float]


def clean_nan_values(obj):
    """Recursively clean NaN values from objects to make them JSON serializable"""
    if isinstance(obj, dict):
        return {k: clean_nan_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [clean_nan_values(item) for item in obj]
    elif isinstance(obj, float) and math.isnan(obj):
        return None
    elif isinstance(obj, (int, float)) and math.isinf(obj):
        return None
    else:
        return obj


def dumps(responses: Any, indent: Optional[int] = None) -> str:
    return json.dumps(clean_nan_values(responses), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
#  Base requests
# ---------------------------------------------------------------------------
def process_base_requests(base_requests: List[Dict[str, Any]], network: TransitNetwork):
    """
    Fill the network from base requests.

    Stops come first so that road distances and bus lines may reference stops
    declared later in the document; distances are applied once every stop is
    known, bus lines last.
    """
    try:
        pending_distances: List[PendingDistance] = []
        for request in base_requests:
            if request[TYPE] == STOP:
                pending_distances.extend(_process_stop_request(request, network))

        for from_stop, to_stop, meters in pending_distances:
            network.set_distance(from_stop, to_stop, meters)

        bus_count = 0
        for request in base_requests:
            if request[TYPE] == BUS:
                _process_bus_request(request, network)
                bus_count += 1
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise RequestFormatError(f"Malformed base request: {e!r}") from e

    logger.info(f"Loaded {len(network)} stops, {bus_count} bus lines, {len(pending_distances)} road distances")


def _process_stop_request(request: Dict[str, Any], network: TransitNetwork) -> List[PendingDistance]:
    name = request[NAME]
    coords = Coordinates(lat=float(request[LATITUDE]), lng=float(request[LONGITUDE]))
    road_distances = request.get(ROAD_DISTANCES, {})
    if not isinstance(road_distances, dict):
        raise RequestFormatError(f"Stop {name}: road_distances must be an object")
    network.add_stop(name, coords)
    return [(name, neighbor, float(meters)) for neighbor, meters in road_distances.items()]


def _process_bus_request(request: Dict[str, Any], network: TransitNetwork):
    stop_names = [str(stop_name) for stop_name in request[STOPS]]
    is_round_trip = request[IS_ROUNDTRIP]
    if not isinstance(is_round_trip, bool):
        raise RequestFormatError(f"Bus {request[NAME]}: is_roundtrip must be a boolean")
    network.add_bus_line(request[NAME], stop_names, is_round_trip)


# ---------------------------------------------------------------------------
#  Settings
# ---------------------------------------------------------------------------
def parse_routing_settings(settings: Dict[str, Any]) -> RoutingSettings:
    try:
        return RoutingSettings(
            bus_wait_time=float(settings[BUS_WAIT_TIME]),
            bus_velocity=float(settings[BUS_VELOCITY]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RequestFormatError(f"Malformed routing settings: {e!r}") from e


def parse_color(node: Any) -> Optional[Color]:
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        if len(node) == 3:
            return int(node[0]), int(node[1]), int(node[2])
        if len(node) == 4:
            return int(node[0]), int(node[1]), int(node[2]), float(node[3])
    return None


def parse_offset(node: List[float]) -> Point:
    return Point(float(node[0]), float(node[1]))


def parse_render_settings(settings: Dict[str, Any]) -> RenderSettings:
    try:
        return RenderSettings(
            width=float(settings['width']),
            height=float(settings['height']),
            padding=float(settings['padding']),
            line_width=float(settings['line_width']),
            stop_radius=float(settings['stop_radius']),
            bus_label_font_size=int(settings['bus_label_font_size']),
            bus_label_offset=parse_offset(settings['bus_label_offset']),
            stop_label_font_size=int(settings['stop_label_font_size']),
            stop_label_offset=parse_offset(settings['stop_label_offset']),
            underlayer_color=parse_color(settings['underlayer_color']),
            underlayer_width=float(settings['underlayer_width']),
            color_palette=[parse_color(color) for color in settings['color_palette']],
        )
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise RequestFormatError(f"Malformed render settings: {e!r}") from e


# ---------------------------------------------------------------------------
#  Stat requests
# ---------------------------------------------------------------------------
def error_response(request_id: int, message: str = NOT_FOUND) -> Dict[str, Any]:
    return {REQUEST_ID: request_id, ERROR_MESSAGE: message}


def handle_stop_request(request: Dict[str, Any], handler: RequestHandler) -> Dict[str, Any]:
    buses = handler.get_buses_serving_stop(request[NAME])
    if buses is None:
        return error_response(request[ID])
    return {REQUEST_ID: request[ID], BUSES: buses}


def handle_bus_request(request: Dict[str, Any], handler: RequestHandler) -> Dict[str, Any]:
    stats = handler.get_line_statistics(request[NAME])
    if stats is None:
        return error_response(request[ID])
    return {
        REQUEST_ID: request[ID],
        CURVATURE: stats.curvature,
        ROUTE_LENGTH: stats.route_length,
        STOP_COUNT: stats.stop_count,
        UNIQUE_STOP_COUNT: stats.unique_stop_count,
    }


def handle_map_request(request: Dict[str, Any], handler: RequestHandler) -> Dict[str, Any]:
    return {REQUEST_ID: request[ID], MAP_KEY: handler.render_map()}


def itinerary_to_dict(result: ItineraryResult) -> Dict[str, Any]:
    """Route response body without the request id"""
    itinerary = result.itinerary
    items = []
    for leg in itinerary.legs:
        if isinstance(leg, WaitLeg):
            items.append({TYPE: WAIT, STOP_NAME: leg.stop_name, TIME: leg.duration})
        elif isinstance(leg, RideLeg):
            items.append({TYPE: BUS, BUS_KEY: leg.line_name, SPAN_COUNT: leg.span_count, TIME: leg.duration})
    return {TOTAL_TIME: itinerary.total_time, ITEMS: items}


def handle_route_request(request: Dict[str, Any], handler: RequestHandler) -> Dict[str, Any]:
    result = handler.build_itinerary(request[FROM], request[TO])
    if not result.is_found:
        return error_response(request[ID])
    response = {REQUEST_ID: request[ID]}
    response.update(itinerary_to_dict(result))
    return response


STAT_HANDLERS = {
    STOP: handle_stop_request,
    BUS: handle_bus_request,
    MAP: handle_map_request,
    ROUTE: handle_route_request,
}


def process_stat_requests(stat_requests: List[Dict[str, Any]], handler: RequestHandler) -> List[Dict[str, Any]]:
    """Answer stat requests in order; unknown request types are skipped"""
    responses = []
    for request in stat_requests:
        try:
            request_type = request[TYPE]
            request_id = request[ID]
        except (KeyError, TypeError) as e:
            raise RequestFormatError(f"Malformed stat request: {e!r}") from e

        stat_handler = STAT_HANDLERS.get(request_type)
        if stat_handler is None:
            logger.warning(f"Unknown stat request type {request_type!r} (id={request_id}), skipping")
            continue

        start = time.time()
        try:
            response = stat_handler(request, handler)
        except KeyError as e:
            raise RequestFormatError(f"Stat request {request_id} is missing {e}") from e
        catalogue_logger.log_stat_request(request_id, request_type, (time.time() - start) * 1000,
                                          ERROR_MESSAGE not in response)
        responses.append(response)
    return responses


# ---------------------------------------------------------------------------
#  Whole documents
# ---------------------------------------------------------------------------
def build_request_handler(document: Dict[str, Any]) -> RequestHandler:
    """Ingest base requests and settings, build the router once"""
    if not isinstance(document, dict):
        raise RequestFormatError("Input document must be a JSON object")

    network = TransitNetwork()
    process_base_requests(document.get('base_requests', []), network)

    routing_settings = None
    if 'routing_settings' in document:
        routing_settings = parse_routing_settings(document['routing_settings'])

    renderer = None
    if 'render_settings' in document:
        renderer = MapRenderer(parse_render_settings(document['render_settings']))

    return RequestHandler.create(network, routing_settings=routing_settings, renderer=renderer)


def process_document(document: Dict[str, Any]) -> List[Dict[str, Any]]:
    handler = build_request_handler(document)
    return process_stat_requests(document.get('stat_requests', []), handler)


def load_document(text: str) -> Dict[str, Any]:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise RequestFormatError(f"Invalid JSON input: {e}") from e
