"""
Minimal SVG document model used by the map renderer
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

# A color is a named string, an (r, g, b) triple or an (r, g, b, opacity) quad
Color = Union[str, Tuple[int, int, int], Tuple[int, int, int, float]]
NONE_COLOR = 'none'

_ESCAPES = {
    '"': '&quot;',
    "'": '&apos;',
    '<': '&lt;',
    '>': '&gt;',
    '&': '&amp;',
}


def format_number(value: float) -> str:
    """Six significant digits, no trailing zeros"""
    return f"{value:g}"


def format_color(color: Optional[Color]) -> str:
    if color is None:
        return NONE_COLOR
    if isinstance(color, str):
        return color
    if len(color) == 3:
        return f"rgb({int(color[0])},{int(color[1])},{int(color[2])})"
    return f"rgba({int(color[0])},{int(color[1])},{int(color[2])},{format_number(color[3])})"


def escape_text(data: str) -> str:
    return ''.join(_ESCAPES.get(ch, ch) for ch in data)


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


class Shape:
    """Base for drawable objects carrying fill/stroke attributes"""

    def __init__(self):
        self.fill_color: Optional[str] = None
        self.stroke_color: Optional[str] = None
        self.stroke_width: Optional[float] = None
        self.stroke_linecap: Optional[str] = None
        self.stroke_linejoin: Optional[str] = None

    def set_fill_color(self, color: Optional[Color]):
        self.fill_color = format_color(color)
        return self

    def set_stroke_color(self, color: Optional[Color]):
        self.stroke_color = format_color(color)
        return self

    def set_stroke_width(self, width: float):
        self.stroke_width = width
        return self

    def set_stroke_linecap(self, linecap: str):
        self.stroke_linecap = linecap
        return self

    def set_stroke_linejoin(self, linejoin: str):
        self.stroke_linejoin = linejoin
        return self

    def render_attrs(self) -> str:
        attrs = []
        if self.fill_color is not None:
            attrs.append(f' fill="{self.fill_color}"')
        if self.stroke_color is not None:
            attrs.append(f' stroke="{self.stroke_color}"')
        if self.stroke_width is not None:
            attrs.append(f' stroke-width="{format_number(self.stroke_width)}"')
        if self.stroke_linecap is not None:
            attrs.append(f' stroke-linecap="{self.stroke_linecap}"')
        if self.stroke_linejoin is not None:
            attrs.append(f' stroke-linejoin="{self.stroke_linejoin}"')
        return ''.join(attrs)

    def render(self) -> str:
        raise NotImplementedError


class Circle(Shape):

    def __init__(self, center: Point = Point(), radius: float = 1.0):
        super().__init__()
        self.center = center
        self.radius = radius

    def render(self) -> str:
        return (f'<circle cx="{format_number(self.center.x)}" cy="{format_number(self.center.y)}" '
                f'r="{format_number(self.radius)}" {self.render_attrs()}/>')


class Polyline(Shape):

    def __init__(self):
        super().__init__()
        self.points: List[Point] = []

    def add_point(self, point: Point):
        self.points.append(point)
        return self

    def render(self) -> str:
        points = ' '.join(f"{format_number(p.x)},{format_number(p.y)}" for p in self.points)
        return f'<polyline points="{points}"{self.render_attrs()} />'


class Text(Shape):

    def __init__(self, data: str = '', position: Point = Point(), offset: Point = Point(),
                 font_size: int = 1, font_family: str = '', font_weight: str = ''):
        super().__init__()
        self.data = data
        self.position = position
        self.offset = offset
        self.font_size = font_size
        self.font_family = font_family
        self.font_weight = font_weight

    def render(self) -> str:
        parts = [
            f'<text x="{format_number(self.position.x)}" y="{format_number(self.position.y)}"',
            f' dx="{format_number(self.offset.x)}" dy="{format_number(self.offset.y)}"',
            f' font-size="{self.font_size}"',
        ]
        if self.font_family:
            parts.append(f' font-family="{self.font_family}"')
        if self.font_weight:
            parts.append(f' font-weight="{self.font_weight}"')
        parts.append(self.render_attrs())
        parts.append(f'>{escape_text(self.data)}</text>')
        return ''.join(parts)


class Document:
    """Ordered collection of shapes rendered as one SVG document"""

    def __init__(self):
        self.objects: List[Shape] = []

    def add(self, obj: Shape):
        self.objects.append(obj)

    def render(self) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8" ?>',
            '<svg xmlns="http://www.w3.org/2000/svg" version="1.1">',
        ]
        lines.extend('  ' + obj.render() for obj in self.objects)
        lines.append('</svg>')
        return '\n'.join(lines)
