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

from .geometry import geometry, Point, Geometry, DegenerateGeometry, intersect_ray_segment, reflect
from . import constants
from .wall_policy import WallKind, WallOutcome, get_policy, next_kind
from .ray import BeamSegment
from .scene import Scene, Node, Wall, WallSegment, SceneSnapshot, InvalidEndpoint
from .emitter import Emitter
from .beam_color import decay_intensity, constant_intensity, gradient_color, solid_color
from .simulator import Simulator, trace_beam
from .svg_renderer import SVGRenderer

__all__ = [
    'geometry', 'Point', 'Geometry', 'DegenerateGeometry',
    'intersect_ray_segment', 'reflect',
    'constants',
    'WallKind', 'WallOutcome', 'get_policy', 'next_kind',
    'BeamSegment',
    'Scene', 'Node', 'Wall', 'WallSegment', 'SceneSnapshot', 'InvalidEndpoint',
    'Emitter',
    'decay_intensity', 'constant_intensity', 'gradient_color', 'solid_color',
    'Simulator', 'trace_beam',
    'SVGRenderer'
]
