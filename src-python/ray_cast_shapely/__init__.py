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

Ray Cast Shapely
================

Core of a 2D ray-reflection sandbox: nodes and walls on a canvas, a laser
emitter, and a propagation engine that traces the beam as it reflects off
mirrors, stops at absorbing walls and passes through transparent ones.

Main modules:
- core: Geometry kernel, scene graph, wall policies, emitter, simulator,
  SVG renderer
- layouts: Scene builders (boundary box, perfect labyrinth)

Quick start:
    from ray_cast_shapely import Scene, Emitter, Simulator, WallKind

    scene = Scene()
    a = scene.add_node((100, 0))
    b = scene.add_node((100, 200))
    scene.add_wall(a, b, WallKind.MIRROR)
    segments = Simulator(scene, Emitter((0, 50), (1, 0.2))).run()
"""

__version__ = "0.1.0"

# Convenience imports for common usage
from .core.scene import Scene, InvalidEndpoint
from .core.emitter import Emitter
from .core.simulator import Simulator, trace_beam
from .core.ray import BeamSegment
from .core.wall_policy import WallKind
from .core.geometry import DegenerateGeometry, Point

__all__ = [
    'Scene',
    'InvalidEndpoint',
    'Emitter',
    'Simulator',
    'trace_beam',
    'BeamSegment',
    'WallKind',
    'DegenerateGeometry',
    'Point',
    '__version__',
]
