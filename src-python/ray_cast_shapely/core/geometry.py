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
from typing import Dict, NamedTuple, Optional, Tuple, Union
from shapely.geometry import Point as ShapelyPoint, LineString

from .constants import MIN_RAY_SEGMENT_LENGTH, PARALLEL_THRESHOLD, MIN_WALL_LENGTH


class DegenerateGeometry(ValueError):
    """
    Raised when an input cannot define a ray or a segment.

    Zero-length walls, zero-length directions and non-finite coordinates
    end up here. The simulator catches it per wall and skips that wall.
    """


class Point(NamedTuple):
    """
    A point (or a vector) in 2D space.

    Immutable, so it can sit inside wall snapshots and beam segments.
    """
    x: float
    y: float

    @classmethod
    def coerce(cls, value: Union['Point', Tuple[float, float], Dict[str, float]]) -> 'Point':
        """Build a Point from a Point, an (x, y) pair or an {'x', 'y'} dict."""
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            return cls(float(value['x']), float(value['y']))
        x, y = value
        return cls(float(x), float(y))

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary representation."""
        return {'x': self.x, 'y': self.y}

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


class Geometry:
    """
    The geometry kernel: pure functions on points and vectors.

    Everything here is stateless; the module exposes a ``geometry`` singleton
    so call sites read as ``geometry.dot(a, b)``.
    """

    @staticmethod
    def add(p1: Point, p2: Point) -> Point:
        """Component-wise sum of two vectors."""
        return Point(p1.x + p2.x, p1.y + p2.y)

    @staticmethod
    def sub(p1: Point, p2: Point) -> Point:
        """Component-wise difference ``p1 - p2``."""
        return Point(p1.x - p2.x, p1.y - p2.y)

    @staticmethod
    def scale(p1: Point, k: float) -> Point:
        """Multiply a vector by a scalar."""
        return Point(p1.x * k, p1.y * k)

    @staticmethod
    def dot(p1: Point, p2: Point) -> float:
        """
        Calculate the dot product, where the two points are treated as vectors.

        Args:
            p1: First point (as vector)
            p2: Second point (as vector)

        Returns:
            Dot product
        """
        return p1.x * p2.x + p1.y * p2.y

    @staticmethod
    def cross(p1: Point, p2: Point) -> float:
        """
        Calculate the cross product, where the two points are treated as vectors.

        Args:
            p1: First point (as vector)
            p2: Second point (as vector)

        Returns:
            Cross product (z-component in 2D)
        """
        return p1.x * p2.y - p1.y * p2.x

    @staticmethod
    def length(p1: Point) -> float:
        """Euclidean norm of a vector."""
        return math.hypot(p1.x, p1.y)

    @staticmethod
    def distance(p1: Point, p2: Point) -> float:
        """
        Calculate the distance between two points.

        Args:
            p1: First point
            p2: Second point

        Returns:
            Distance between points
        """
        return math.sqrt(Geometry.distance_squared(p1, p2))

    @staticmethod
    def distance_squared(p1: Point, p2: Point) -> float:
        """
        Calculate the squared distance between two points.

        Args:
            p1: First point
            p2: Second point

        Returns:
            Squared distance between points
        """
        dx = p1.x - p2.x
        dy = p1.y - p2.y
        return dx * dx + dy * dy

    @staticmethod
    def normalize_vec(p1: Point) -> Point:
        """
        Normalize the given point as if it were a vector.

        Args:
            p1: Point (as vector)

        Returns:
            Normalized vector

        Raises:
            DegenerateGeometry: If the vector has zero (or non-finite) length.
        """
        len_val = Geometry.length(p1)
        if not math.isfinite(len_val) or len_val < MIN_WALL_LENGTH:
            raise DegenerateGeometry(f"Cannot normalize vector {p1}")
        return Point(p1.x / len_val, p1.y / len_val)

    @staticmethod
    def rotate_vec(p1: Point, angle: float) -> Point:
        """
        Rotate the given point as if it were a vector by the given angle in radians.

        Args:
            p1: Point (as vector)
            angle: Rotation angle in radians

        Returns:
            Rotated vector
        """
        # Rotate by the rotation matrix
        return Point(
            p1.x * math.cos(angle) - p1.y * math.sin(angle),
            p1.x * math.sin(angle) + p1.y * math.cos(angle)
        )

    @staticmethod
    def segment_normal(seg_a: Point, seg_b: Point) -> Point:
        """
        Unit left-hand normal of the segment seg_a -> seg_b.

        Raises:
            DegenerateGeometry: If the segment is shorter than MIN_WALL_LENGTH.
        """
        _check_segment(seg_a, seg_b)
        d = Geometry.normalize_vec(Geometry.sub(seg_b, seg_a))
        return Point(-d.y, d.x)

    @staticmethod
    def facing_normal(direction: Point, seg_a: Point, seg_b: Point) -> Point:
        """Unit normal of the segment, flipped so that it faces the incoming direction."""
        n = Geometry.segment_normal(seg_a, seg_b)
        if Geometry.dot(direction, n) > 0:
            n = Point(-n.x, -n.y)
        return n

    @staticmethod
    def intersect_ray_segment(
        ray_origin: Point,
        ray_dir: Point,
        seg_a: Point,
        seg_b: Point,
        epsilon: float = MIN_RAY_SEGMENT_LENGTH,
        endpoint_slack: float = 0.0
    ) -> Optional[Tuple[float, Point]]:
        """
        Intersect a ray with a segment.

        With r = ray_dir and s = seg_b - seg_a, solve
        ``origin + t*r = seg_a + u*s``. The hit is valid when ``t > epsilon``
        and ``0 <= u <= 1``. Parallel and collinear configurations are
        reported as no hit.

        Args:
            ray_origin: Start of the ray
            ray_dir: Direction of the ray (t is measured in units of its length)
            seg_a: First endpoint of the segment
            seg_b: Second endpoint of the segment
            epsilon: Minimum ray parameter for a valid hit
            endpoint_slack: Distance past either end of the segment that still
                counts as a hit (default: 0, exact bounds). The simulator
                passes its epsilon so that a ray aimed at a node shared by
                two walls cannot slip between them through rounding.

        Returns:
            (t, hit_point) or None if the ray misses the segment

        Raises:
            DegenerateGeometry: If the segment has zero length, the direction
                is zero, or any coordinate is not finite.
        """
        _check_finite(ray_origin, ray_dir)
        _check_segment(seg_a, seg_b)
        r_len = Geometry.length(ray_dir)
        if r_len < MIN_WALL_LENGTH:
            raise DegenerateGeometry(f"Ray direction {ray_dir} has zero length")

        s = Geometry.sub(seg_b, seg_a)
        s_len = Geometry.length(s)
        denom = Geometry.cross(ray_dir, s)
        if abs(denom) <= PARALLEL_THRESHOLD * r_len * s_len:
            return None

        qp = Geometry.sub(seg_a, ray_origin)
        t = Geometry.cross(qp, s) / denom
        u = Geometry.cross(qp, ray_dir) / denom

        u_slack = endpoint_slack / s_len
        if t <= epsilon or u < -u_slack or u > 1.0 + u_slack:
            return None
        return t, Point(ray_origin.x + t * ray_dir.x, ray_origin.y + t * ray_dir.y)

    @staticmethod
    def reflect(direction: Point, normal: Point) -> Point:
        """
        Mirror a direction about a surface normal: d' = d - 2(d.n)n.

        The normal is normalized and oriented against the incoming direction
        first, so either side of the wall may be passed in.

        Args:
            direction: Incoming direction
            normal: Surface normal (any length, either orientation)

        Returns:
            Reflected direction, same length as ``direction``
        """
        n = Geometry.normalize_vec(normal)
        d_dot_n = Geometry.dot(direction, n)
        if d_dot_n > 0:
            n = Point(-n.x, -n.y)
            d_dot_n = -d_dot_n
        return Point(direction.x - 2 * d_dot_n * n.x, direction.y - 2 * d_dot_n * n.y)

    @staticmethod
    def point_segment_distance(point: Point, seg_a: Point, seg_b: Point) -> float:
        """
        Shortest distance from a point to a segment, using Shapely.

        Degenerate segments are measured as a point.
        """
        p = ShapelyPoint(point.x, point.y)
        if Geometry.distance_squared(seg_a, seg_b) < MIN_WALL_LENGTH * MIN_WALL_LENGTH:
            return p.distance(ShapelyPoint(seg_a.x, seg_a.y))
        return LineString([(seg_a.x, seg_a.y), (seg_b.x, seg_b.y)]).distance(p)


def _check_finite(*points: Point) -> None:
    for p in points:
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise DegenerateGeometry(f"Non-finite coordinate in {p}")


def _check_segment(seg_a: Point, seg_b: Point) -> None:
    _check_finite(seg_a, seg_b)
    if Geometry.distance_squared(seg_a, seg_b) < MIN_WALL_LENGTH * MIN_WALL_LENGTH:
        raise DegenerateGeometry(f"Zero-length segment at {seg_a}")


# Create a singleton instance for convenience
geometry = Geometry()

# Module-level aliases for the kernel operations
intersect_ray_segment = Geometry.intersect_ray_segment
reflect = Geometry.reflect
