import pytest

from transitrouting.catalogue.transit_network import TransitNetwork
from transitrouting.exceptions import InvalidConfigurationError
from transitrouting.models.domain import Coordinates
from transitrouting.readers.json_reader import parse_render_settings
from transitrouting.rendering.map_renderer import MapRenderer, RenderSettings, SphereProjector
from transitrouting.rendering.svg import Circle, Document, Point, Polyline, Text, format_color


def test_format_color():
    assert format_color(None) == 'none'
    assert format_color('red') == 'red'
    assert format_color((255, 16, 12)) == 'rgb(255,16,12)'
    assert format_color((255, 200, 23, 0.85)) == 'rgba(255,200,23,0.85)'


def test_circle_render():
    circle = Circle(center=Point(20, 20), radius=10).set_fill_color('white')
    assert circle.render() == '<circle cx="20" cy="20" r="10"  fill="white"/>'


def test_polyline_render():
    polyline = (Polyline().add_point(Point(0, 0)).add_point(Point(1.5, 2))
                .set_fill_color(None).set_stroke_color('green').set_stroke_width(14))
    assert polyline.render() == '<polyline points="0,0 1.5,2" fill="none" stroke="green" stroke-width="14" />'


def test_text_is_escaped():
    text = Text(data='"A" & <B>', position=Point(1, 2), offset=Point(3, 4), font_size=12,
                font_family='Verdana')
    assert text.render() == ('<text x="1" y="2" dx="3" dy="4" font-size="12" font-family="Verdana">'
                             '&quot;A&quot; &amp; &lt;B&gt;</text>')


def test_document_render():
    doc = Document()
    doc.add(Circle(center=Point(1, 1), radius=1))
    assert doc.render().splitlines() == [
        '<?xml version="1.0" encoding="UTF-8" ?>',
        '<svg xmlns="http://www.w3.org/2000/svg" version="1.1">',
        '  <circle cx="1" cy="1" r="1" />',
        '</svg>',
    ]


def test_sphere_projector_corners():
    points = [Coordinates(10, 20), Coordinates(20, 40)]
    projector = SphereProjector(points, max_width=200, max_height=100, padding=0)
    # zoom is min(200 / 20, 100 / 10) = 10
    assert projector(Coordinates(20, 20)) == Point(0, 0)
    assert projector(Coordinates(10, 40)) == Point(200, 100)


def test_sphere_projector_single_point():
    projector = SphereProjector([Coordinates(10, 20)], max_width=200, max_height=100, padding=5)
    assert projector(Coordinates(10, 20)) == Point(5, 5)


def test_render_settings_validation():
    with pytest.raises(InvalidConfigurationError):
        MapRenderer(RenderSettings(width=0, height=100, padding=10))
    with pytest.raises(InvalidConfigurationError):
        MapRenderer(RenderSettings(width=100, height=100, padding=60, color_palette=['red']))


def test_map_layers_are_in_order(linear_network, render_settings_dict):
    svg = MapRenderer(parse_render_settings(render_settings_dict)).render(linear_network)
    lines = svg.splitlines()[2:-1]

    kinds = [line.strip().split(' ')[0] for line in lines]
    # 2 routes, line "1" and "2" labelled at both termini (2 texts each), 5 stops, 5 stop labels
    assert kinds == ['<polyline'] * 2 + ['<text'] * 8 + ['<circle'] * 5 + ['<text'] * 10

    assert 'stroke="green"' in lines[0]
    assert 'stroke="rgb(255,160,0)"' in lines[1]
    assert '>Lonely<' not in svg


def test_round_trip_is_labelled_once(render_settings_dict):
    network = TransitNetwork()
    network.add_stop('X', Coordinates(55.0, 37.0))
    network.add_stop('Y', Coordinates(55.01, 37.01))
    network.add_bus_line('R', ['X', 'Y', 'X'], is_round_trip=True)
    svg = MapRenderer(parse_render_settings(render_settings_dict)).render(network)
    assert svg.count('>R</text>') == 2  # underlayer + label


def test_empty_network_renders_empty_document(render_settings_dict):
    svg = MapRenderer(parse_render_settings(render_settings_dict)).render(TransitNetwork())
    assert svg.splitlines()[-1] == '</svg>'
    assert len(svg.splitlines()) == 3


def test_empty_palette_fails_at_render(linear_network):
    renderer = MapRenderer(RenderSettings(width=100, height=100, padding=10))
    with pytest.raises(InvalidConfigurationError):
        renderer.render(linear_network)
