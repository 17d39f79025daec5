"""
SVG map of the transit network: route polylines, bus labels, stop markers
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..catalogue.transit_network import TransitNetwork
from ..exceptions import InvalidConfigurationError
from ..models.domain import BusLine, Coordinates, Stop
from .svg import Circle, Color, Document, Point, Polyline, Text

logger = logging.getLogger(__name__)

FONT_VERDANA = 'Verdana'
FONT_WEIGHT_BOLD = 'bold'
COLOR_WHITE = 'white'
COLOR_BLACK = 'black'
LINE_CAP_ROUND = 'round'
LINE_JOIN_ROUND = 'round'


@dataclass
class RenderSettings:
    """Map canvas, label and palette settings"""
    width: float = 0.0
    height: float = 0.0
    padding: float = 0.0
    line_width: float = 0.0
    stop_radius: float = 0.0
    bus_label_font_size: int = 0
    bus_label_offset: Point = Point()
    stop_label_font_size: int = 0
    stop_label_offset: Point = Point()
    underlayer_color: Optional[Color] = None
    underlayer_width: float = 0.0
    color_palette: List[Color] = field(default_factory=list)

    def validate(self):
        """Validate render settings"""
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfigurationError("Map width and height must be positive")
        if self.padding < 0 or 2 * self.padding > min(self.width, self.height):
            raise InvalidConfigurationError(f"Padding {self.padding} does not fit the map")


class SphereProjector:
    """Projects geographic coordinates onto the map canvas"""

    def __init__(self, points: Sequence[Coordinates], max_width: float, max_height: float,
                 padding: float):
        self.padding = padding
        self.min_lon = 0.0
        self.max_lat = 0.0
        self.zoom_coeff = 0.0
        if not points:
            return

        self.min_lon = min(p.lng for p in points)
        max_lon = max(p.lng for p in points)
        min_lat = min(p.lat for p in points)
        self.max_lat = max(p.lat for p in points)

        width_zoom = None
        if max_lon != self.min_lon:
            width_zoom = (max_width - 2 * padding) / (max_lon - self.min_lon)

        height_zoom = None
        if self.max_lat != min_lat:
            height_zoom = (max_height - 2 * padding) / (self.max_lat - min_lat)

        zooms = [z for z in (width_zoom, height_zoom) if z is not None]
        if zooms:
            self.zoom_coeff = min(zooms)

    def __call__(self, coords: Coordinates) -> Point:
        return Point(
            (coords.lng - self.min_lon) * self.zoom_coeff + self.padding,
            (self.max_lat - coords.lat) * self.zoom_coeff + self.padding,
        )


class MapRenderer:
    """Renders a transit network into an SVG document"""

    def __init__(self, settings: RenderSettings):
        settings.validate()
        self.settings = settings

    def render_map(self, network: TransitNetwork) -> Document:
        if not self.settings.color_palette:
            raise InvalidConfigurationError("Color palette must not be empty")
        doc = Document()
        lines = sorted((line for line in network.bus_lines() if line.stops), key=lambda line: line.name)

        all_coords = [network.stop(h).coordinates for line in lines for h in line.stops]
        projector = SphereProjector(all_coords, self.settings.width, self.settings.height,
                                    self.settings.padding)

        self._render_routes(doc, network, lines, projector)
        self._render_bus_labels(doc, network, lines, projector)

        used_stops = self._collect_used_stops(network, lines)
        self._render_stop_circles(doc, used_stops, projector)
        self._render_stop_labels(doc, used_stops, projector)

        logger.debug(f"Rendered map: {len(lines)} lines, {len(used_stops)} stops")
        return doc

    def render(self, network: TransitNetwork) -> str:
        return self.render_map(network).render()

    def _palette_color(self, index: int) -> Color:
        palette = self.settings.color_palette
        return palette[index % len(palette)]

    @staticmethod
    def _collect_used_stops(network: TransitNetwork, lines: List[BusLine]) -> List[Stop]:
        used = {network.stop(h).name: network.stop(h) for line in lines for h in line.stops}
        return [used[name] for name in sorted(used)]

    def _render_routes(self, doc: Document, network: TransitNetwork, lines: List[BusLine],
                       projector: SphereProjector):
        for index, line in enumerate(lines):
            polyline = (Polyline()
                        .set_stroke_color(self._palette_color(index))
                        .set_stroke_width(self.settings.line_width)
                        .set_fill_color(None)
                        .set_stroke_linecap(LINE_CAP_ROUND)
                        .set_stroke_linejoin(LINE_JOIN_ROUND))
            for handle in line.stops:
                polyline.add_point(projector(network.stop(handle).coordinates))
            doc.add(polyline)

    def _render_bus_labels(self, doc: Document, network: TransitNetwork, lines: List[BusLine],
                           projector: SphereProjector):
        for index, line in enumerate(lines):
            color = self._palette_color(index)
            first_stop = line.stops[0]
            self._add_bus_label(doc, line.name, projector(network.stop(first_stop).coordinates), color)

            # Linear lines are also labelled at their far terminus
            if not line.is_round_trip and line.original_stop_count > 1:
                last_stop = line.stops[line.original_stop_count - 1]
                if last_stop != first_stop:
                    self._add_bus_label(doc, line.name, projector(network.stop(last_stop).coordinates), color)

    def _add_bus_label(self, doc: Document, name: str, position: Point, color: Color):
        settings = self.settings
        underlayer = (Text(data=name, position=position, offset=settings.bus_label_offset,
                           font_size=settings.bus_label_font_size, font_family=FONT_VERDANA,
                           font_weight=FONT_WEIGHT_BOLD)
                      .set_fill_color(settings.underlayer_color)
                      .set_stroke_color(settings.underlayer_color)
                      .set_stroke_width(settings.underlayer_width)
                      .set_stroke_linecap(LINE_CAP_ROUND)
                      .set_stroke_linejoin(LINE_JOIN_ROUND))
        label = (Text(data=name, position=position, offset=settings.bus_label_offset,
                      font_size=settings.bus_label_font_size, font_family=FONT_VERDANA,
                      font_weight=FONT_WEIGHT_BOLD)
                 .set_fill_color(color))
        doc.add(underlayer)
        doc.add(label)

    def _render_stop_circles(self, doc: Document, stops: List[Stop], projector: SphereProjector):
        for stop in stops:
            circle = Circle(center=projector(stop.coordinates), radius=self.settings.stop_radius)
            doc.add(circle.set_fill_color(COLOR_WHITE))

    def _render_stop_labels(self, doc: Document, stops: List[Stop], projector: SphereProjector):
        settings = self.settings
        for stop in stops:
            position = projector(stop.coordinates)
            underlayer = (Text(data=stop.name, position=position, offset=settings.stop_label_offset,
                               font_size=settings.stop_label_font_size, font_family=FONT_VERDANA)
                          .set_fill_color(settings.underlayer_color)
                          .set_stroke_color(settings.underlayer_color)
                          .set_stroke_width(settings.underlayer_width)
                          .set_stroke_linecap(LINE_CAP_ROUND)
                          .set_stroke_linejoin(LINE_JOIN_ROUND))
            label = (Text(data=stop.name, position=position, offset=settings.stop_label_offset,
                          font_size=settings.stop_label_font_size, font_family=FONT_VERDANA)
                     .set_fill_color(COLOR_BLACK))
            doc.add(underlayer)
            doc.add(label)
