"""
Copyright 2026 ray-cast-shapely authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import math

import svgwrite

from .beam_color import to_svg_color
from .geometry import Point
from .wall_policy import WallKind

# Stroke colours per wall kind
WALL_COLORS = {
    WallKind.MIRROR: '#8be9fd',
    WallKind.ABSORBING: '#44475a',
    WallKind.TRANSPARENT: '#bd93f9',
}
WALL_DASH = {
    WallKind.MIRROR: None,
    WallKind.ABSORBING: None,
    WallKind.TRANSPARENT: '6, 4',
}
BACKGROUND_COLOR = '#282a36'
NODE_COLOR = '#f8f8f2'
EMITTER_COLOR = '#ff5555'


class SVGRenderer:
    """
    Headless SVG snapshot of a scene, an emitter and a traced beam.

    The SVG is organized into three layers:
    - objects: walls, nodes and the emitter (below the beam)
    - rays: beam segments
    - labels: text annotations (above everything)

    Elements carry data-* attributes (wall id and kind, bounce index and
    interaction of each beam segment) for post-processing.

    Coordinate System:
        The renderer uses a Y-up coordinate system (positive Y points upward),
        which matches mathematical convention. This is achieved by applying
        a vertical flip transformation to the SVG coordinate system.

    Attributes:
        width (int): Canvas width in pixels
        height (int): Canvas height in pixels
        viewbox (tuple): SVG viewBox (min_x, min_y, width, height), Y-down
        user_viewbox (tuple): The same viewBox in Y-up coordinates
        dwg (svgwrite.Drawing): The SVG drawing object
    """

    def __init__(self, width=800, height=600, viewbox=None, background=BACKGROUND_COLOR):
        """
        Initialize the SVG renderer.

        Args:
            width (int): Canvas width in pixels (default: 800)
            height (int): Canvas height in pixels (default: 600)
            viewbox (tuple or None): SVG viewBox as (min_x, min_y, width, height)
                                    If None, uses (0, 0, width, height)
            background (str or None): Background fill, None for transparent
        """
        self.width = width
        self.height = height
        self.user_viewbox = viewbox if viewbox is not None else (0, 0, width, height)

        # Convert user's Y-up viewbox to SVG's Y-down viewbox
        min_x, min_y, vb_width, vb_height = self.user_viewbox
        self.viewbox = (min_x, -(min_y + vb_height), vb_width, vb_height)

        # profile='full' enables data-* attributes; debug=False skips
        # svgwrite's strict attribute validation
        self.dwg = svgwrite.Drawing(size=(f'{width}px', f'{height}px'),
                                    profile='full', debug=False)
        self.dwg.viewbox(*self.viewbox)

        if background:
            self.dwg.add(self.dwg.rect(
                insert=(self.viewbox[0], self.viewbox[1]),
                size=(self.viewbox[2], self.viewbox[3]),
                fill=background
            ))

        # Layers (bottom to top) with Y-flip
        self.layer_objects = self.dwg.add(self.dwg.g(id='layer-objects', transform='scale(1, -1)'))
        self.layer_rays = self.dwg.add(self.dwg.g(id='layer-rays', transform='scale(1, -1)'))
        self.layer_labels = self.dwg.add(self.dwg.g(id='layer-labels', transform='scale(1, -1)'))

    def _normalize_coord(self, value):
        """Map -0.0 and values within 1e-10 of zero to 0.0."""
        if value == 0.0 or abs(value) < 1e-10:
            return 0.0
        return value

    def _normalize_point(self, point):
        p = Point.coerce(point)
        return Point(self._normalize_coord(p.x), self._normalize_coord(p.y))

    def draw_point(self, point, color=NODE_COLOR, radius=3, label=None, element_id=None):
        """
        Draw a point (circle).

        Args:
            point: Point, (x, y) pair or {'x', 'y'} dict
            color (str): Fill color
            radius (float): Circle radius in pixels (default: 3)
            label (str or None): Optional text label to show near point
            element_id (str or None): Optional SVG id
        """
        point = self._normalize_point(point)
        circle = self.dwg.circle(center=(point.x, point.y), r=radius, fill=color)
        if element_id:
            circle['id'] = element_id
        self.layer_objects.add(circle)

        if label:
            self._add_label(label, point.x + radius + 2, point.y + radius + 2, color)
        return circle

    def draw_line_segment(self, p1, p2, color='gray', stroke_width=2, label=None,
                          dash=None, element_id=None):
        """
        Draw a line segment on the objects layer.

        Args:
            p1: Start point
            p2: End point
            color (str): Stroke color (default: 'gray')
            stroke_width (float): Line width in pixels (default: 2)
            label (str or None): Optional text label at the midpoint
            dash (str or None): SVG stroke-dasharray
            element_id (str or None): Optional SVG id
        """
        p1 = self._normalize_point(p1)
        p2 = self._normalize_point(p2)

        line = self.dwg.line(
            start=(p1.x, p1.y),
            end=(p2.x, p2.y),
            stroke=color,
            stroke_width=stroke_width,
            stroke_linecap='round'
        )
        if dash:
            line['stroke-dasharray'] = dash
        if element_id:
            line['id'] = element_id
        self.layer_objects.add(line)

        if label:
            self._add_label(label,
                            self._normalize_coord((p1.x + p2.x) / 2),
                            self._normalize_coord((p1.y + p2.y) / 2),
                            color, anchor='middle')
        return line

    def draw_wall(self, wall_segment, thickness=5.0, show_id=False):
        """Draw one WallSegment, styled by its kind."""
        kind = WallKind(wall_segment.kind)
        line = self.draw_line_segment(
            wall_segment.p1, wall_segment.p2,
            color=WALL_COLORS[kind],
            stroke_width=thickness,
            label=str(wall_segment.id) if show_id else None,
            dash=WALL_DASH[kind],
            element_id=f'wall-{wall_segment.id}'
        )
        line['class'] = f'wall wall-{kind.value}'
        line['data-wall-id'] = str(wall_segment.id)
        line['data-kind'] = kind.value
        return line

    def draw_emitter(self, emitter, length=None, color=EMITTER_COLOR):
        """
        Draw the emitter as a dot with a short aiming stub.

        Args:
            emitter: The Emitter
            length (float or None): Stub length (default: 3 * thickness)
            color (str): Fill and stroke color
        """
        if length is None:
            length = 3 * emitter.thickness
        tip = emitter.direction_point(length)
        self.draw_line_segment(emitter.position, tip, color=color,
                               stroke_width=emitter.thickness, element_id='emitter-stub')
        dot = self.draw_point(emitter.position, color=color, radius=emitter.thickness,
                              element_id='emitter')
        dot['data-angle-deg'] = f'{math.degrees(emitter.angle):.4f}'
        return dot

    def draw_beam_segment(self, segment, stroke_width=2.0):
        """
        Draw a BeamSegment on the rays layer, clipped to the viewbox.

        Color and opacity come from the segment's color and brightness.

        Returns:
            The svgwrite line, or None if the segment lies outside the viewbox
        """
        p1, p2 = self._clip_to_viewbox(segment.p1, segment.p2)
        if p1 is None:
            return None
        p1 = self._normalize_point(p1)
        p2 = self._normalize_point(p2)

        stroke, alpha = to_svg_color(segment.color)
        opacity = max(0.0, min(1.0, alpha * segment.brightness))
        line = self.dwg.line(
            start=(p1.x, p1.y),
            end=(p2.x, p2.y),
            stroke=stroke,
            stroke_width=stroke_width,
            stroke_opacity=opacity,
            stroke_linecap='round'
        )
        line['id'] = f'beam-{segment.uuid}'
        line['class'] = f'beam beam-{segment.interaction}'
        line['data-bounce-index'] = str(segment.bounce_index)
        line['data-interaction'] = segment.interaction
        self.layer_rays.add(line)
        return line

    def draw_scene(self, scene, emitter=None, segments=None, draw_nodes=True,
                   show_ids=False, beam_width=None):
        """
        Draw walls, nodes, the emitter and the beam.

        Args:
            scene: The Scene
            emitter: The Emitter (optional)
            segments: List of BeamSegment (optional)
            draw_nodes (bool): Draw node dots (default: True)
            show_ids (bool): Label walls and nodes with their ids
            beam_width (float or None): Beam stroke width (default: emitter thickness, or 2)

        Returns:
            bool: True on success.
        """
        for wall in scene.walls():
            self.draw_wall(wall, thickness=scene.get_wall(wall.id).thickness, show_id=show_ids)

        if draw_nodes:
            for node in scene.nodes():
                circle = self.draw_point(node.position, radius=node.radius / 2,
                                         label=str(node.id) if show_ids else None,
                                         element_id=f'node-{node.id}')
                circle['data-node-id'] = str(node.id)

        if emitter is not None:
            self.draw_emitter(emitter)

        if segments:
            if beam_width is None:
                beam_width = emitter.thickness if emitter is not None else 2.0
            for seg in segments:
                self.draw_beam_segment(seg, stroke_width=beam_width)

        return True

    def _add_label(self, text, x, y, color, anchor='start'):
        label = self.dwg.text(
            text,
            insert=(x, -y),
            fill=color,
            font_size='8px',
            font_family='sans-serif',
            text_anchor=anchor,
            transform='scale(1, -1)'  # Flip text back to be readable
        )
        self.layer_labels.add(label)
        return label

    def _clip_to_viewbox(self, p1, p2):
        """
        Clip a line segment to the viewbox boundaries.

        Uses Liang-Barsky algorithm to clip the line segment p1-p2 to the viewbox.

        Args:
            p1: Start point in Y-up coordinates
            p2: End point in Y-up coordinates

        Returns:
            tuple: (clipped_p1, clipped_p2) or (None, None) if completely outside
        """
        p1 = Point.coerce(p1)
        p2 = Point.coerce(p2)
        min_x, min_y, width, height = self.user_viewbox
        max_x = min_x + width
        max_y = min_y + height

        dx = p2.x - p1.x
        dy = p2.y - p1.y
        t0, t1 = 0.0, 1.0

        for p, q in ((-dx, p1.x - min_x), (dx, max_x - p1.x),
                     (-dy, p1.y - min_y), (dy, max_y - p1.y)):
            if abs(p) < 1e-10:
                # Parallel to this edge
                if q < 0:
                    return None, None
            else:
                t = q / p
                if p < 0:
                    t0 = max(t0, t)
                else:
                    t1 = min(t1, t)

        if t0 > t1:
            return None, None

        return (Point(p1.x + t0 * dx, p1.y + t0 * dy),
                Point(p1.x + t1 * dx, p1.y + t1 * dy))

    def save(self, filename: str = None):
        """
        Save the SVG to a file.

        Args:
            filename (str): Output filename (default: 'output.svg')
        """
        if filename is None:
            filename = "output.svg"
        self.dwg.saveas(filename)

    def to_string(self):
        """
        Get the SVG as a string.

        Returns:
            str: SVG content as XML string
        """
        return self.dwg.tostring()
