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
import uuid as uuid_module

from .constants import DEFAULT_BEAM_THICKNESS, DEFAULT_BRIGHTNESS
from .geometry import Point, geometry


class Emitter:
    """
    The laser emitter.

    An emitter is a position plus a unit direction. The direction is
    normalized on every mutation, so readers always see a unit vector.

    Attributes:
        position (Point): Beam origin.
        direction (Point): Unit beam direction.
        angle (float): Direction as an angle in radians, counter-clockwise from +x.
        thickness (float): Beam width; the half-width is thickness / 2.
        collision_enabled (bool): When False the beam ignores every wall.
        brightness (float): Brightness of the first segment (0.01 to 1.0).

    Raises:
        DegenerateGeometry: When a zero-length direction is set.
        ValueError: When thickness or brightness is out of range.
    """

    def __init__(self, position=(0.0, 0.0), direction=(1.0, 0.0),
                 thickness: float = DEFAULT_BEAM_THICKNESS,
                 collision_enabled: bool = True,
                 brightness: float = DEFAULT_BRIGHTNESS):
        self._position = Point.coerce(position)
        self._direction = geometry.normalize_vec(Point.coerce(direction))
        self._thickness = DEFAULT_BEAM_THICKNESS
        self._brightness = DEFAULT_BRIGHTNESS
        self.thickness = thickness
        self.brightness = brightness
        self.collision_enabled = collision_enabled
        self.uuid = str(uuid_module.uuid4())

    @property
    def position(self) -> Point:
        return self._position

    @position.setter
    def position(self, value):
        self._position = Point.coerce(value)

    @property
    def direction(self) -> Point:
        return self._direction

    @direction.setter
    def direction(self, value):
        self._direction = geometry.normalize_vec(Point.coerce(value))

    @property
    def angle(self) -> float:
        return math.atan2(self._direction.y, self._direction.x)

    @angle.setter
    def angle(self, value: float):
        self._direction = geometry.normalize_vec(Point(math.cos(value), math.sin(value)))

    @property
    def thickness(self) -> float:
        return self._thickness

    @thickness.setter
    def thickness(self, value: float):
        """Set the beam thickness with validation."""
        if not value > 0:
            raise ValueError(f"Invalid thickness {value}: must be > 0")
        self._thickness = float(value)

    @property
    def half_width(self) -> float:
        return self._thickness / 2

    @property
    def brightness(self) -> float:
        return self._brightness

    @brightness.setter
    def brightness(self, value: float):
        if not 0 < value <= 1.0:
            raise ValueError(f"Invalid brightness {value}: must be in (0, 1]")
        self._brightness = float(value)

    def move(self, diff_x, diff_y):
        """
        Move the emitter.

        Args:
            diff_x: X displacement.
            diff_y: Y displacement.
        """
        self._position = Point(self._position.x + diff_x, self._position.y + diff_y)

    def rotate(self, angle, center=None):
        """
        Rotate the emitter.

        The direction always turns by ``angle``. When a center is given the
        position orbits around it as well.

        Args:
            angle: Rotation angle in radians (counter-clockwise).
            center: Center of rotation (defaults to the emitter position).
        """
        if center is not None:
            c = Point.coerce(center)
            offset = geometry.rotate_vec(geometry.sub(self._position, c), angle)
            self._position = geometry.add(c, offset)
        self._direction = geometry.normalize_vec(geometry.rotate_vec(self._direction, angle))

    def look_at(self, target):
        """
        Aim the emitter at a point.

        Raises:
            DegenerateGeometry: If the target coincides with the emitter position.
        """
        self.direction = geometry.sub(Point.coerce(target), self._position)

    def toggle_collision(self) -> bool:
        """Flip collision_enabled and return the new value."""
        self.collision_enabled = not self.collision_enabled
        return self.collision_enabled

    def direction_point(self, distance: float = 1.0) -> Point:
        """Point ``distance`` units ahead of the emitter along its direction."""
        return geometry.add(self._position, geometry.scale(self._direction, distance))

    def __repr__(self) -> str:
        return (f"Emitter(position={self._position}, angle={math.degrees(self.angle):.2f}deg, "
                f"collision_enabled={self.collision_enabled})")
