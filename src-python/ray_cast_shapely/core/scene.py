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

import logging
import uuid as uuid_module
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from .constants import NODE_RADIUS, WALL_THICKNESS
from .geometry import Point, geometry
from .wall_policy import WallKind, next_kind

logger = logging.getLogger(__name__)

NodeId = int
WallId = int


class InvalidEndpoint(ValueError):
    """Raised when a wall would reference an unknown node or join a node to itself."""


class Node:
    """
    A draggable anchor point.

    Attributes:
        id (int): Stable identifier, never reused within a scene
        position (Point): Current coordinates
        radius (float): Hit radius used by Scene.node_at
    """

    def __init__(self, node_id: NodeId, position: Point, radius: float = NODE_RADIUS):
        self.id = node_id
        self.position = position
        self.radius = radius

    def __repr__(self) -> str:
        return f"Node(id={self.id}, position={self.position})"


class Wall:
    """
    A segment between two nodes.

    Walls hold node ids only; coordinates are resolved through the scene,
    so moving a node moves every wall attached to it.

    Attributes:
        id (int): Stable identifier
        node_a (int): First endpoint
        node_b (int): Second endpoint
        kind (WallKind): Mirror, absorbing or transparent
        thickness (float): Display thickness, also the pick width
    """

    def __init__(self, wall_id: WallId, node_a: NodeId, node_b: NodeId,
                 kind: WallKind = WallKind.MIRROR, thickness: float = WALL_THICKNESS):
        self.id = wall_id
        self.node_a = node_a
        self.node_b = node_b
        self.kind = WallKind(kind)
        self.thickness = thickness

    @property
    def endpoints(self) -> FrozenSet[NodeId]:
        return frozenset((self.node_a, self.node_b))

    def __repr__(self) -> str:
        return f"Wall(id={self.id}, {self.node_a}->{self.node_b}, kind={self.kind.value})"


@dataclass(frozen=True)
class WallSegment:
    """A wall with its endpoint coordinates resolved at snapshot time."""
    id: WallId
    p1: Point
    p2: Point
    kind: WallKind


@dataclass(frozen=True)
class SceneSnapshot:
    """Immutable view of the walls handed to one propagation call."""
    walls: Tuple[WallSegment, ...]
    scene_uuid: str


class Scene:
    """
    Arena of nodes and walls keyed by integer ids.

    The scene owns all nodes and walls. An incidence index maps each node to
    the walls that touch it, so removing a node removes its walls in the
    same call. Every mutation goes through one of the methods below, and
    each one either completes or leaves the scene untouched.

    Attributes:
        name (str or None): Optional name for the scene (used in exports)
    """

    def __init__(self, name: Optional[str] = None):
        """Initialize an empty scene."""
        self._nodes: Dict[NodeId, Node] = {}
        self._walls: Dict[WallId, Wall] = {}
        self._incidence: Dict[NodeId, Set[WallId]] = {}
        self._pairs: Dict[FrozenSet[NodeId], WallId] = {}
        self._next_node_id: NodeId = 0
        self._next_wall_id: WallId = 0
        self.name = name
        self._uuid: str = str(uuid_module.uuid4())

    @property
    def uuid(self) -> str:
        """
        Get the unique identifier for this scene.

        The UUID is auto-generated when the scene is created and remains
        constant for the lifetime of the scene instance.
        """
        return self._uuid

    def get_display_name(self) -> str:
        """
        Get a display name for the scene.

        Returns the user-defined name if set, otherwise "Scene" plus a short
        UUID suffix (e.g. "Scene_a1b2c3d4").
        """
        if self.name:
            return self.name
        return f"Scene_{self._uuid[:8]}"

    # =========================================================================
    # Nodes
    # =========================================================================

    def add_node(self, point) -> NodeId:
        """
        Add a node at the given position.

        Args:
            point: Point, (x, y) pair or {'x', 'y'} dict

        Returns:
            The id of the new node
        """
        node_id = self._next_node_id
        self._next_node_id += 1
        self._nodes[node_id] = Node(node_id, Point.coerce(point))
        self._incidence[node_id] = set()
        logger.info(f"Node {node_id} created at {self._nodes[node_id].position}")
        return node_id

    def move_node(self, node_id: NodeId, new_point) -> None:
        """
        Move a node; every incident wall follows.

        Raises:
            KeyError: If the node does not exist.
        """
        if node_id not in self._nodes:
            raise KeyError(f"Unknown node id {node_id}")
        self._nodes[node_id].position = Point.coerce(new_point)

    def remove_node(self, node_id: NodeId) -> None:
        """Remove a node and all walls attached to it. Unknown ids are ignored."""
        if node_id not in self._nodes:
            return
        for wall_id in sorted(self._incidence[node_id]):
            self.remove_wall(wall_id)
        del self._incidence[node_id]
        del self._nodes[node_id]
        logger.info(f"Node {node_id} removed")

    def get_node(self, node_id: NodeId) -> Node:
        return self._nodes[node_id]

    def nodes(self) -> List[Node]:
        """All nodes, in creation order."""
        return list(self._nodes.values())

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._nodes

    # =========================================================================
    # Walls
    # =========================================================================

    def add_wall(self, node_a: NodeId, node_b: NodeId,
                 kind: WallKind = WallKind.MIRROR) -> WallId:
        """
        Connect two existing nodes with a wall.

        A second wall between the same pair of nodes is not created; the id
        of the existing wall is returned instead.

        Args:
            node_a: First endpoint
            node_b: Second endpoint
            kind: Wall behaviour (default: mirror)

        Returns:
            The id of the new (or already existing) wall

        Raises:
            InvalidEndpoint: If either id is unknown or both ids are equal.
        """
        self._check_endpoints(node_a, node_b)
        kind = WallKind(kind)
        pair = frozenset((node_a, node_b))
        existing = self._pairs.get(pair)
        if existing is not None:
            logger.info(f"Wall between {node_a} and {node_b} already exists (wall {existing})")
            return existing

        wall_id = self._next_wall_id
        self._next_wall_id += 1
        self._walls[wall_id] = Wall(wall_id, node_a, node_b, kind)
        self._incidence[node_a].add(wall_id)
        self._incidence[node_b].add(wall_id)
        self._pairs[pair] = wall_id
        logger.info(f"Wall {wall_id} created between {node_a} and {node_b} ({kind.value})")
        return wall_id

    def add_wall_to_point(self, node_id: NodeId, point,
                          kind: WallKind = WallKind.MIRROR) -> Tuple[NodeId, WallId]:
        """
        Connect an existing node to empty space, creating the terminal node.

        Returns:
            (new_node_id, wall_id)

        Raises:
            InvalidEndpoint: If ``node_id`` is unknown (nothing is created).
        """
        if node_id not in self._nodes:
            raise InvalidEndpoint(f"Unknown node id {node_id}")
        new_node = self.add_node(point)
        return new_node, self.add_wall(node_id, new_node, kind)

    def remove_wall(self, wall_id: WallId) -> None:
        """Remove a wall; its nodes stay. Unknown ids are ignored."""
        wall = self._walls.pop(wall_id, None)
        if wall is None:
            return
        self._incidence[wall.node_a].discard(wall_id)
        self._incidence[wall.node_b].discard(wall_id)
        del self._pairs[wall.endpoints]
        logger.debug(f"Wall {wall_id} removed")

    def cycle_wall_kind(self, wall_id: WallId) -> WallKind:
        """
        Advance a wall to the next kind (Mirror -> Absorbing -> Transparent -> Mirror).

        Returns:
            The new kind

        Raises:
            KeyError: If the wall does not exist.
        """
        wall = self._walls[wall_id]
        wall.kind = next_kind(wall.kind)
        logger.debug(f"Wall {wall_id} is now {wall.kind.value}")
        return wall.kind

    def set_wall_kind(self, wall_id: WallId, kind: WallKind) -> None:
        self._walls[wall_id].kind = WallKind(kind)

    def get_wall(self, wall_id: WallId) -> Wall:
        return self._walls[wall_id]

    def walls_of(self, node_id: NodeId) -> Set[WallId]:
        """Ids of the walls incident to a node."""
        return set(self._incidence[node_id])

    @property
    def wall_count(self) -> int:
        return len(self._walls)

    def wall_endpoints(self, wall_id: WallId) -> Tuple[Point, Point]:
        """Current coordinates of both ends of a wall."""
        wall = self._walls[wall_id]
        return self._nodes[wall.node_a].position, self._nodes[wall.node_b].position

    def walls(self) -> List[WallSegment]:
        """
        Snapshot of all walls with resolved coordinates, in creation order.

        The returned segments are frozen; later scene edits do not change them.
        """
        return [
            WallSegment(wall.id,
                        self._nodes[wall.node_a].position,
                        self._nodes[wall.node_b].position,
                        wall.kind)
            for wall in self._walls.values()
        ]

    def snapshot(self) -> SceneSnapshot:
        """Frozen view of the walls for one propagation call."""
        return SceneSnapshot(tuple(self.walls()), self._uuid)

    # =========================================================================
    # Picking
    # =========================================================================

    def node_at(self, point) -> Optional[NodeId]:
        """First node whose hit radius contains the point, or None."""
        p = Point.coerce(point)
        for node in self._nodes.values():
            if geometry.distance_squared(node.position, p) <= node.radius * node.radius:
                return node.id
        return None

    def wall_at(self, point) -> Optional[WallId]:
        """First wall within half its thickness of the point, or None."""
        p = Point.coerce(point)
        for wall in self._walls.values():
            a, b = self.wall_endpoints(wall.id)
            if geometry.point_segment_distance(p, a, b) <= wall.thickness / 2:
                return wall.id
        return None

    def clear(self):
        """Remove all nodes and walls. Id counters keep running."""
        self._nodes.clear()
        self._walls.clear()
        self._incidence.clear()
        self._pairs.clear()

    def _check_endpoints(self, node_a: NodeId, node_b: NodeId) -> None:
        for node_id in (node_a, node_b):
            if node_id not in self._nodes:
                raise InvalidEndpoint(f"Unknown node id {node_id}")
        if node_a == node_b:
            raise InvalidEndpoint(f"Wall endpoints must differ (got {node_a} twice)")

    def __repr__(self) -> str:
        return f"Scene(name={self.get_display_name()!r}, nodes={len(self._nodes)}, walls={len(self._walls)})"
