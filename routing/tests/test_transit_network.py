import math

import pytest

from transitrouting.catalogue.transit_network import TransitNetwork, expand_stop_sequence
from transitrouting.models.domain import Coordinates, LineStatistics
from transitrouting.utils.geo_utils import haversine_distance, path_length


def test_expand_linear_line_goes_there_and_back():
    assert expand_stop_sequence(['A', 'B', 'C'], False) == ['A', 'B', 'C', 'B', 'A']


def test_expand_round_trip_is_kept_as_is():
    assert expand_stop_sequence(['A', 'B', 'C', 'A'], True) == ['A', 'B', 'C', 'A']


def test_expand_empty_line():
    assert expand_stop_sequence([], False) == []


def test_distance_falls_back_to_reverse_direction(linear_network):
    assert linear_network.get_distance('B', 'A') == 1000
    assert linear_network.get_distance('C', 'B') == 2000


def test_directed_distance_overrides_reverse(linear_network):
    linear_network.set_distance('B', 'A', 1200)
    assert linear_network.get_distance('A', 'B') == 1000
    assert linear_network.get_distance('B', 'A') == 1200


def test_missing_distance_is_zero(linear_network):
    assert linear_network.get_distance('A', 'C') == 0.0
    assert linear_network.get_distance('A', 'Nowhere') == 0.0


def test_set_distance_to_unknown_stop_is_skipped(linear_network):
    assert linear_network.set_distance('A', 'Nowhere', 10) is False


def test_re_adding_stop_updates_coordinates(linear_network):
    stop = linear_network.add_stop('A', Coordinates(1.0, 2.0))
    assert stop.handle == 0
    assert linear_network.find_stop('A').coordinates == Coordinates(1.0, 2.0)
    assert len(linear_network) == 6


def test_line_statistics_for_linear_line(linear_network):
    stats = linear_network.get_line_statistics('1')
    assert stats.stop_count == 5
    assert stats.unique_stop_count == 3
    assert stats.route_length == pytest.approx(6000)

    a, b, c = (linear_network.find_stop(name).coordinates for name in 'ABC')
    one_way = haversine_distance(a.lat, a.lng, b.lat, b.lng) + haversine_distance(b.lat, b.lng, c.lat, c.lng)
    assert stats.geographic_length == pytest.approx(2 * one_way)
    assert stats.curvature == pytest.approx(6000 / (2 * one_way))


def test_line_statistics_for_round_trip():
    network = TransitNetwork()
    network.add_stop('X', Coordinates(55.0, 37.0))
    network.add_stop('Y', Coordinates(55.01, 37.0))
    network.set_distance('X', 'Y', 1500)
    network.set_distance('Y', 'X', 1700)
    network.add_bus_line('R', ['X', 'Y', 'X'], is_round_trip=True)

    stats = network.get_line_statistics('R')
    assert stats.stop_count == 3
    assert stats.unique_stop_count == 2
    assert stats.route_length == pytest.approx(3200)


def test_unknown_line_statistics_is_none(linear_network):
    assert linear_network.get_line_statistics('999') is None


def test_degenerate_curvature_is_not_finite():
    assert math.isnan(LineStatistics(1, 1, 0.0, 0.0).curvature)
    assert math.isinf(LineStatistics(2, 1, 100.0, 0.0).curvature)


def test_buses_serving_stop_are_sorted():
    network = TransitNetwork()
    network.add_stop('X', Coordinates(55.0, 37.0))
    network.add_stop('Y', Coordinates(55.01, 37.0))
    network.add_bus_line('828', ['X', 'Y'], is_round_trip=False)
    network.add_bus_line('256', ['Y', 'X'], is_round_trip=False)
    assert network.get_buses_serving_stop('X') == ['256', '828']


def test_stop_without_buses_and_unknown_stop(linear_network):
    assert linear_network.get_buses_serving_stop('Lonely') == []
    assert linear_network.get_buses_serving_stop('Nowhere') is None


def test_unknown_stops_in_line_are_skipped(linear_network):
    line = linear_network.add_bus_line('3', ['A', 'Nowhere', 'C'], is_round_trip=False)
    assert linear_network.stop_names(line) == ['A', 'C', 'A']
    assert line.original_stop_count == 2


def test_re_adding_line_replaces_it(linear_network):
    linear_network.add_bus_line('1', ['D', 'E'], is_round_trip=False)
    assert linear_network.get_buses_serving_stop('A') == []
    assert linear_network.get_buses_serving_stop('D') == ['1', '2']
    assert linear_network.get_line_statistics('1').stop_count == 3


def test_path_length_of_single_point_is_zero():
    assert path_length([(55.0, 37.0)]) == 0.0
    assert path_length([]) == 0.0
