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

"""
===============================================================================
Perfect labyrinth layout
===============================================================================
A grid of square cells carved into a perfect maze (exactly one path between
any two cells) with a randomized depth-first search. Each cell stores its
four sides as a bitmask; a set bit means the side is closed.

The closed sides can be exported as wall lines, either one per cell side or
merged into maximal straight runs, and added to a Scene with nodes shared at
the grid corners. With one wall per side, dragging a corner drags every wall
that meets there. A merged run only has nodes at its two ends, so it passes
through the T-junctions along it without being attached to them.
===============================================================================
"""

import logging
import random
from enum import IntFlag
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..core.scene import NodeId, Scene, WallId
from ..core.wall_policy import WallKind

logger = logging.getLogger(__name__)

GridLine = Tuple[Tuple[float, float], Tuple[float, float]]


class Side(IntFlag):
    TOP = 0b1000
    BOTTOM = 0b0100
    LEFT = 0b0010
    RIGHT = 0b0001


ALL_SIDES = Side.TOP | Side.BOTTOM | Side.LEFT | Side.RIGHT

# (dx, dy) -> (side opened on the current cell, side opened on the neighbour)
_DIRECTIONS: Dict[Tuple[int, int], Tuple[Side, Side]] = {
    (0, -1): (Side.TOP, Side.BOTTOM),
    (0, 1): (Side.BOTTOM, Side.TOP),
    (1, 0): (Side.RIGHT, Side.LEFT),
    (-1, 0): (Side.LEFT, Side.RIGHT),
}


class Labyrinth:
    """
    Grid maze with closed-side bitmasks.

    Row 0 is at y = 0 and rows grow towards +y; cell (x, y) spans
    [x * cell_size, (x + 1) * cell_size] on both axes.

    Attributes:
        cell_size (float): Side length of one cell
        size (tuple): (width, height) in cells
        cells (np.ndarray): uint8 array of shape (height, width), one bitmask per cell
    """

    def __init__(self, cell_size: float, size: Tuple[int, int]):
        width, height = size
        if width < 1 or height < 1:
            raise ValueError(f"Invalid labyrinth size {size}: both dimensions must be >= 1")
        if not cell_size > 0:
            raise ValueError(f"Invalid cell_size {cell_size}: must be > 0")
        self.cell_size = float(cell_size)
        self.size = (int(width), int(height))
        self.cells = np.full((height, width), int(ALL_SIDES), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    def is_open(self, x: int, y: int, side: Side) -> bool:
        return not (int(self.cells[y, x]) & side)

    def is_closed(self, x: int, y: int, side: Side) -> bool:
        return not self.is_open(x, y, side)

    def open(self, x: int, y: int, side: Side) -> None:
        self.cells[y, x] = int(self.cells[y, x]) & ~int(side)

    def generate_depth_first(self, seed: Optional[int] = None) -> 'Labyrinth':
        """
        Carve a perfect maze with a randomized depth-first search.

        Starts from cell (0, 0). Every cell is visited exactly once, so the
        opened passages form a spanning tree of the grid.

        Args:
            seed: Seed for the direction shuffle (None = nondeterministic)

        Returns:
            self, for chaining
        """
        rng = random.Random(seed)
        self.cells.fill(int(ALL_SIDES))
        visited = np.zeros((self.height, self.width), dtype=bool)
        visited[0, 0] = True
        stack: List[Tuple[int, int]] = [(0, 0)]
        directions = list(_DIRECTIONS)

        while stack:
            x, y = stack[-1]
            rng.shuffle(directions)
            for dx, dy in directions:
                nx, ny = x + dx, y + dy
                if not (0 <= nx < self.width and 0 <= ny < self.height):
                    continue
                if visited[ny, nx]:
                    continue
                visited[ny, nx] = True
                here, there = _DIRECTIONS[(dx, dy)]
                self.open(x, y, here)
                self.open(nx, ny, there)
                stack.append((nx, ny))
                break
            else:
                stack.pop()

        logger.debug(f"Generated {self.width}x{self.height} labyrinth (seed={seed})")
        return self

    def passage_count(self) -> int:
        """Number of opened internal sides (each counted once)."""
        right_open = ~self.cells[:, :-1] & int(Side.RIGHT)
        bottom_open = ~self.cells[:-1, :] & int(Side.BOTTOM)
        return int(np.count_nonzero(right_open) + np.count_nonzero(bottom_open))

    def get_as_lines_explicit(self) -> List[GridLine]:
        """
        One line per closed cell side, shared sides reported once.

        Returns:
            List of ((x1, y1), (x2, y2)) tuples
        """
        s = self.cell_size
        lines: List[GridLine] = []
        for y in range(self.height):
            for x in range(self.width):
                x0, y0, x1, y1 = x * s, y * s, (x + 1) * s, (y + 1) * s
                if y == 0 and self.is_closed(x, y, Side.TOP):
                    lines.append(((x0, y0), (x1, y0)))
                if x == 0 and self.is_closed(x, y, Side.LEFT):
                    lines.append(((x0, y0), (x0, y1)))
                if self.is_closed(x, y, Side.BOTTOM):
                    lines.append(((x0, y1), (x1, y1)))
                if self.is_closed(x, y, Side.RIGHT):
                    lines.append(((x1, y0), (x1, y1)))
        return lines

    def get_as_lines(self) -> List[GridLine]:
        """
        Closed sides merged into maximal horizontal and vertical runs.

        Returns:
            List of ((x1, y1), (x2, y2)) tuples
        """
        s = self.cell_size
        lines: List[GridLine] = []

        # Horizontal grid lines: row index r in [0, height]
        for r in range(self.height + 1):
            start = None
            for x in range(self.width + 1):
                closed = x < self.width and (
                    self.is_closed(x, r, Side.TOP) if r < self.height
                    else self.is_closed(x, r - 1, Side.BOTTOM)
                )
                if closed and start is None:
                    start = x
                elif not closed and start is not None:
                    lines.append(((start * s, r * s), (x * s, r * s)))
                    start = None

        # Vertical grid lines: column index c in [0, width]
        for c in range(self.width + 1):
            start = None
            for y in range(self.height + 1):
                closed = y < self.height and (
                    self.is_closed(c, y, Side.LEFT) if c < self.width
                    else self.is_closed(c - 1, y, Side.RIGHT)
                )
                if closed and start is None:
                    start = y
                elif not closed and start is not None:
                    lines.append(((c * s, start * s), (c * s, y * s)))
                    start = None

        return lines

    def add_to_scene(
        self,
        scene: Scene,
        origin: Tuple[float, float] = (0.0, 0.0),
        kind: WallKind = WallKind.MIRROR,
        merge: bool = True
    ) -> List[WallId]:
        """
        Add the closed sides to a scene as walls.

        Endpoints at the same grid corner share one node. Merged runs are
        joined only at their ends, not at the corners they pass through.

        Args:
            scene: Target scene
            origin: World position of the grid corner (0, 0)
            kind: Kind given to every wall
            merge: Use merged runs (get_as_lines) instead of one wall per side

        Returns:
            Ids of the created walls
        """
        ox, oy = origin
        corner_nodes: Dict[Tuple[float, float], NodeId] = {}

        def node_for(p: Tuple[float, float]) -> NodeId:
            if p not in corner_nodes:
                corner_nodes[p] = scene.add_node((ox + p[0], oy + p[1]))
            return corner_nodes[p]

        lines = self.get_as_lines() if merge else self.get_as_lines_explicit()
        wall_ids = [scene.add_wall(node_for(a), node_for(b), kind) for a, b in lines]
        logger.info(f"Added labyrinth with {len(wall_ids)} walls and {len(corner_nodes)} nodes")
        return wall_ids
