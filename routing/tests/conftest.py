import pytest

from transitrouting.catalogue.transit_network import TransitNetwork
from transitrouting.models.domain import Coordinates, RoutingSettings


@pytest.fixture
def linear_network():
    """A - B - C driven there and back as line "1", plus an isolated pair D - E on line "2"."""
    network = TransitNetwork()
    network.add_stop('A', Coordinates(55.611087, 37.20829))
    network.add_stop('B', Coordinates(55.595884, 37.209755))
    network.add_stop('C', Coordinates(55.632761, 37.333324))
    network.add_stop('D', Coordinates(55.574371, 37.6517))
    network.add_stop('E', Coordinates(55.581065, 37.64839))
    network.add_stop('Lonely', Coordinates(55.0, 37.0))
    network.set_distance('A', 'B', 1000)
    network.set_distance('B', 'C', 2000)
    network.set_distance('D', 'E', 500)
    network.add_bus_line('1', ['A', 'B', 'C'], is_round_trip=False)
    network.add_bus_line('2', ['D', 'E'], is_round_trip=False)
    return network


@pytest.fixture
def routing_settings():
    return RoutingSettings(bus_wait_time=5, bus_velocity=60)


@pytest.fixture
def render_settings_dict():
    return {
        'width': 600,
        'height': 400,
        'padding': 50,
        'stop_radius': 5,
        'line_width': 14,
        'bus_label_font_size': 20,
        'bus_label_offset': [7, 15],
        'stop_label_font_size': 18,
        'stop_label_offset': [7, -3],
        'underlayer_color': [255, 255, 255, 0.85],
        'underlayer_width': 3,
        'color_palette': ['green', [255, 160, 0], 'red'],
    }


@pytest.fixture
def document(render_settings_dict):
    return {
        'base_requests': [
            {'type': 'Bus', 'name': '1', 'stops': ['A', 'B', 'C'], 'is_roundtrip': False},
            {'type': 'Stop', 'name': 'A', 'latitude': 55.611087, 'longitude': 37.20829,
             'road_distances': {'B': 1000}},
            {'type': 'Stop', 'name': 'B', 'latitude': 55.595884, 'longitude': 37.209755,
             'road_distances': {'C': 2000}},
            {'type': 'Stop', 'name': 'C', 'latitude': 55.632761, 'longitude': 37.333324},
            {'type': 'Stop', 'name': 'Lonely', 'latitude': 55.0, 'longitude': 37.0},
        ],
        'routing_settings': {'bus_wait_time': 5, 'bus_velocity': 60},
        'render_settings': render_settings_dict,
        'stat_requests': [
            {'id': 1, 'type': 'Bus', 'name': '1'},
            {'id': 2, 'type': 'Stop', 'name': 'B'},
            {'id': 3, 'type': 'Route', 'from': 'A', 'to': 'C'},
            {'id': 4, 'type': 'Stop', 'name': 'Nowhere'},
        ],
    }
