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

import uuid as _uuid_mod
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .geometry import Point, geometry

# How a segment ended
INTERACTION_TYPES = ('reflect', 'absorb', 'transmit', 'escape', 'cap')


@dataclass(frozen=True)
class BeamSegment:
    """
    One straight piece of the beam polyline.

    Segments are produced by the Simulator in beam order: segment k + 1
    starts where segment k ended (plus the epsilon nudge off a wall).

    Attributes:
        p1 (Point): Start point
        p2 (Point): End point
        bounce_index (int): Number of mirror reflections before this segment
        brightness (float): Intensity in [0, 1]
        color (tuple): RGBA floats in [0, 1]
        wall_id (int or None): Wall the segment ended on, None for escape.
            At a node shared by several walls, the wall whose kind decided
            the outcome.
        interaction (str): How the segment ended:
            'reflect' = hit a mirror
            'absorb' = hit an absorbing wall
            'transmit' = passed a transparent wall
            'escape' = hit nothing, drawn to the escape distance
            'cap' = last segment after the bounce budget ran out, ending on
                the next wall hit (wall_id is that wall)
        uuid (str): Unique identifier (auto-generated)
        parent_uuid (str or None): UUID of the previous segment
    """
    p1: Point
    p2: Point
    bounce_index: int = 0
    brightness: float = 1.0
    color: Tuple[float, float, float, float] = (1.0, 0.0, 0.0, 1.0)
    wall_id: Optional[int] = None
    interaction: str = 'escape'
    parent_uuid: Optional[str] = None
    uuid: str = field(default_factory=lambda: str(_uuid_mod.uuid4()))

    def __post_init__(self):
        if self.interaction not in INTERACTION_TYPES:
            raise ValueError(
                f"Invalid interaction '{self.interaction}'. "
                f"Valid options: {INTERACTION_TYPES}"
            )

    @property
    def length(self) -> float:
        return geometry.distance(self.p1, self.p2)

    @property
    def direction(self) -> Point:
        """Unit direction from p1 to p2."""
        return geometry.normalize_vec(geometry.sub(self.p2, self.p1))

    def to_dict(self) -> Dict[str, object]:
        return {
            'p1': self.p1.to_dict(),
            'p2': self.p2.to_dict(),
            'bounce_index': self.bounce_index,
            'brightness': self.brightness,
            'color': list(self.color),
            'wall_id': self.wall_id,
            'interaction': self.interaction,
            'uuid': self.uuid,
            'parent_uuid': self.parent_uuid,
        }

    def __repr__(self) -> str:
        return (f"BeamSegment(p1=({self.p1.x:.4f}, {self.p1.y:.4f}), "
                f"p2=({self.p2.x:.4f}, {self.p2.y:.4f}), "
                f"bounce_index={self.bounce_index}, interaction={self.interaction})")
