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

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence

from .constants import MIN_RAY_SEGMENT_LENGTH
from .geometry import Point, geometry


class WallKind(str, Enum):
    """Behaviour of a wall when the beam hits it."""
    MIRROR = "mirror"
    ABSORBING = "absorbing"
    TRANSPARENT = "transparent"


_CYCLE: Dict[WallKind, WallKind] = {
    WallKind.MIRROR: WallKind.ABSORBING,
    WallKind.ABSORBING: WallKind.TRANSPARENT,
    WallKind.TRANSPARENT: WallKind.MIRROR,
}


def next_kind(kind: WallKind) -> WallKind:
    """Mirror -> Absorbing -> Transparent -> Mirror."""
    return _CYCLE[WallKind(kind)]


# Kind that decides the outcome when the beam hits a node shared by walls of different kinds
HIT_PRECEDENCE = (WallKind.ABSORBING, WallKind.MIRROR, WallKind.TRANSPARENT)


@dataclass(frozen=True)
class WallOutcome:
    """
    What a wall does to an incident beam.

    Attributes:
        interaction: 'reflect', 'absorb' or 'transmit'
        terminate: True if the beam stops at the hit point
        direction: Direction of the continuing beam (None when terminated)
        origin: Start of the continuing beam, nudged off the wall
        counts_as_bounce: True if the bounce counter should advance
    """
    interaction: str
    terminate: bool
    direction: Optional[Point] = None
    origin: Optional[Point] = None
    counts_as_bounce: bool = False


class WallPolicy:
    """Base class for per-kind wall behaviour."""

    kind: WallKind

    def on_ray_incident(
        self,
        direction: Point,
        hit_point: Point,
        normal: Point,
        epsilon: float = MIN_RAY_SEGMENT_LENGTH
    ) -> WallOutcome:
        raise NotImplementedError

    def on_vertex_incident(
        self,
        direction: Point,
        hit_point: Point,
        normals: Sequence[Point],
        epsilon: float = MIN_RAY_SEGMENT_LENGTH
    ) -> WallOutcome:
        """
        Outcome when the beam hits a node where several walls of this kind meet.

        ``normals`` holds the facing normal of each wall at the hit point.
        Kinds whose outcome does not depend on the normal just use the first.
        """
        return self.on_ray_incident(direction, hit_point, normals[0], epsilon)


class MirrorPolicy(WallPolicy):
    """
    Reflective wall.

    Implements the law of reflection about the wall normal. The continuing
    beam starts epsilon along the reflected direction so the next nearest
    hit search does not return the same point.
    """

    kind = WallKind.MIRROR

    def on_ray_incident(self, direction, hit_point, normal, epsilon=MIN_RAY_SEGMENT_LENGTH):
        new_dir = geometry.normalize_vec(geometry.reflect(direction, normal))
        return WallOutcome(
            interaction='reflect',
            terminate=False,
            direction=new_dir,
            origin=geometry.add(hit_point, geometry.scale(new_dir, epsilon)),
            counts_as_bounce=True,
        )

    def on_vertex_incident(self, direction, hit_point, normals, epsilon=MIN_RAY_SEGMENT_LENGTH):
        """
        Corner reflection about the sum of the facing normals.

        A 90 degree corner hit along its diagonal sends the beam straight
        back. When the reflected direction would still point into one of
        the walls, the beam is sent back the way it came instead, so the
        nudged origin never lands behind a wall of the corner.
        """
        if len(normals) == 1:
            return self.on_ray_incident(direction, hit_point, normals[0], epsilon)

        summed = Point(sum(n.x for n in normals), sum(n.y for n in normals))
        outcome = self.on_ray_incident(direction, hit_point, summed, epsilon)
        if all(geometry.dot(outcome.direction, n) >= 0 for n in normals):
            return outcome

        back = geometry.normalize_vec(geometry.scale(direction, -1.0))
        return WallOutcome(
            interaction='reflect',
            terminate=False,
            direction=back,
            origin=geometry.add(hit_point, geometry.scale(back, epsilon)),
            counts_as_bounce=True,
        )


class AbsorbingPolicy(WallPolicy):
    """Absorbing wall: the beam ends at the hit point."""

    kind = WallKind.ABSORBING

    def on_ray_incident(self, direction, hit_point, normal, epsilon=MIN_RAY_SEGMENT_LENGTH):
        return WallOutcome(interaction='absorb', terminate=True)


class TransparentPolicy(WallPolicy):
    """Transparent wall: direction unchanged, origin pushed just past the wall."""

    kind = WallKind.TRANSPARENT

    def on_ray_incident(self, direction, hit_point, normal, epsilon=MIN_RAY_SEGMENT_LENGTH):
        d = geometry.normalize_vec(direction)
        return WallOutcome(
            interaction='transmit',
            terminate=False,
            direction=d,
            origin=geometry.add(hit_point, geometry.scale(d, epsilon)),
            counts_as_bounce=False,
        )


_POLICIES: Dict[WallKind, WallPolicy] = {
    WallKind.MIRROR: MirrorPolicy(),
    WallKind.ABSORBING: AbsorbingPolicy(),
    WallKind.TRANSPARENT: TransparentPolicy(),
}


def get_policy(kind: WallKind) -> WallPolicy:
    """
    Look up the policy object for a wall kind.

    Raises:
        ValueError: If ``kind`` is not a WallKind (or its string value).
    """
    return _POLICIES[WallKind(kind)]
