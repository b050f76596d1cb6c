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

from typing import List, Tuple

from ..core.scene import NodeId, Scene, WallId
from ..core.wall_policy import WallKind


def add_boundary_box(
    scene: Scene,
    width: float,
    height: float,
    origin: Tuple[float, float] = (0.0, 0.0),
    kind: WallKind = WallKind.MIRROR
) -> Tuple[List[NodeId], List[WallId]]:
    """
    Add four corner nodes and the four walls joining them.

    Corners are created counter-clockwise from ``origin``:
    (x0, y0), (x0 + width, y0), (x0 + width, y0 + height), (x0, y0 + height).

    Returns:
        (node_ids, wall_ids)

    Raises:
        ValueError: If width or height is not positive.
    """
    if not (width > 0 and height > 0):
        raise ValueError(f"Invalid box size {width}x{height}: both must be > 0")
    x0, y0 = origin
    corners = [(x0, y0), (x0 + width, y0), (x0 + width, y0 + height), (x0, y0 + height)]
    node_ids = [scene.add_node(c) for c in corners]
    wall_ids = [scene.add_wall(node_ids[i], node_ids[(i + 1) % 4], kind) for i in range(4)]
    return node_ids, wall_ids
