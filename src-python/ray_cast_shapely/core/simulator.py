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
from typing import List, Optional, Set, Tuple, TYPE_CHECKING

from .beam_color import ColorFn, IntensityFn, default_color, default_intensity
from .constants import (
    DEFAULT_ESCAPE_DISTANCE,
    DEFAULT_MAX_BOUNCES,
    DEFAULT_MAX_ITERATIONS,
    MIN_RAY_SEGMENT_LENGTH,
    PARALLEL_THRESHOLD,
)
from .geometry import DegenerateGeometry, Point, geometry
from .ray import BeamSegment
from .scene import SceneSnapshot, WallSegment
from .wall_policy import HIT_PRECEDENCE, get_policy

if TYPE_CHECKING:
    from .emitter import Emitter
    from .scene import Scene

logger = logging.getLogger(__name__)

# Values of Simulator.termination
TERMINATIONS = ('collision_disabled', 'escaped', 'absorbed', 'bounce_cap', 'iteration_cap')


class Simulator:
    """
    Beam propagation engine.

    Each call to run() recomputes the whole beam from the emitter pose and a
    frozen snapshot of the scene walls; nothing carries over between calls
    except the diagnostics of the last run. The loop keeps one current
    origin and direction, finds the nearest wall hit, emits a segment up to
    it and lets the wall's policy decide whether the beam stops, reflects or
    passes through.

    A beam that lands on a node meets every wall joined there. The outcome
    is decided by kind (absorbing, then mirror, then transparent); mirrors
    meeting at the node act as one corner reflector. The run only reads
    the scene, so one scene can serve several simulators at once.

    Two budgets bound the work:
    - max_bounces (B): mirror reflections. After the B-th reflection one
      final segment is traced (to the next hit, or escape) and the run ends,
      so B reflections give B + 1 segments. B = 0 ends the run at the first hit.
    - max_iterations: total segments, counting mirror and transparent hits.
      Many transparent walls in a row cannot run away.
    Reaching either budget is a normal end of the run, reported through
    ``termination`` and ``warning``.

    Attributes:
        scene (Scene): The scene to trace against
        emitter (Emitter): Beam source
        max_bounces (int): Mirror reflection budget B
        max_iterations (int): Overall segment budget
        escape_distance (float): Length D of a segment that hits nothing
        epsilon (float): Minimum hit distance and wall nudge
        intensity_fn (callable): bounce_index -> brightness
        color_fn (callable): bounce_index -> RGBA tuple
        verbose (int): Verbosity level
        beam_segments (list): Segments of the last run
        bounce_count (int): Reflections in the last run
        iteration_count (int): Segments emitted in the last run
        termination (str or None): Why the last run ended (see TERMINATIONS)
        skipped_wall_ids (list): Degenerate walls ignored in the last run
        warning (str or None): Message set when a budget was exhausted
    """

    def __init__(
        self,
        scene: 'Scene',
        emitter: 'Emitter',
        max_bounces: int = DEFAULT_MAX_BOUNCES,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        escape_distance: float = DEFAULT_ESCAPE_DISTANCE,
        epsilon: float = MIN_RAY_SEGMENT_LENGTH,
        intensity_fn: Optional[IntensityFn] = None,
        color_fn: Optional[ColorFn] = None,
        verbose: int = 0
    ) -> None:
        """
        Initialize the simulator.

        Args:
            scene (Scene): The scene to trace against
            emitter (Emitter): The beam source
            max_bounces (int): Mirror reflections before the beam is cut, 0 or more (default: 64)
            max_iterations (int): Total segment budget (default: 256)
            escape_distance (float): Length of an escape segment (default: 10000)
            epsilon (float): Minimum hit distance and nudge (default: 1e-6)
            intensity_fn (callable or None): Brightness per bounce index
                (default: geometric decay)
            color_fn (callable or None): RGBA per bounce index
                (default: red -> orange -> yellow gradient)
            verbose (int): Verbosity level (default: 0)
                0 = silent (no debug output)
                1 = verbose (one line per segment)
                2 = very verbose/debug (candidate hits per wall)

        Raises:
            ValueError: If max_bounces is negative, or max_iterations, the escape
                distance or epsilon is not positive.
        """
        if max_bounces < 0:
            raise ValueError(f"Invalid max_bounces {max_bounces}: must be >= 0")
        if max_iterations < 1:
            raise ValueError(f"Invalid max_iterations {max_iterations}: must be >= 1")
        if not escape_distance > 0:
            raise ValueError(f"Invalid escape_distance {escape_distance}: must be > 0")
        if not epsilon > 0:
            raise ValueError(f"Invalid epsilon {epsilon}: must be > 0")

        self.scene: 'Scene' = scene
        self.emitter: 'Emitter' = emitter
        self.max_bounces: int = int(max_bounces)
        self.max_iterations: int = int(max_iterations)
        self.escape_distance: float = float(escape_distance)
        self.epsilon: float = float(epsilon)
        self.intensity_fn: IntensityFn = intensity_fn or default_intensity
        self.color_fn: ColorFn = color_fn or default_color
        self.verbose: int = verbose

        self.beam_segments: List[BeamSegment] = []
        self.bounce_count: int = 0
        self.iteration_count: int = 0
        self.termination: Optional[str] = None
        self.skipped_wall_ids: List[int] = []
        self.warning: Optional[str] = None

    def run(self, snapshot: Optional[SceneSnapshot] = None) -> List[BeamSegment]:
        """
        Trace the beam once.

        Args:
            snapshot (SceneSnapshot or None): Walls to trace against. When
                None a fresh snapshot of ``self.scene`` is taken. Passing one
                snapshot to several simulators traces several emitters
                against the same scene state.

        Returns:
            list: Ordered BeamSegment objects, first one starting at the emitter
        """
        self.beam_segments = []
        self.bounce_count = 0
        self.iteration_count = 0
        self.termination = None
        self.skipped_wall_ids = []
        self.warning = None

        origin: Point = self.emitter.position
        direction: Point = self.emitter.direction

        if not self.emitter.collision_enabled:
            self._emit_escape(origin, direction)
            self.termination = 'collision_disabled'
            return self.beam_segments

        if snapshot is None:
            snapshot = self.scene.snapshot()
        walls = self._usable_walls(snapshot.walls)

        last_wall_ids: Set[int] = set()
        while True:
            if self.iteration_count >= self.max_iterations:
                self.termination = 'iteration_cap'
                self.warning = (f"Simulation stopped: maximum iteration count "
                                f"({self.max_iterations}) reached")
                break

            hit = self._find_nearest_hit(origin, direction, walls, last_wall_ids)

            if hit is None:
                self._emit_escape(origin, direction)
                capped = self.bounce_count > 0 and self._bounce_cap_reached()
                self.termination = 'bounce_cap' if capped else 'escaped'
                break

            hit_point, hit_walls = hit
            wall, same_kind = self._deciding_walls(hit_walls)

            if self._bounce_cap_reached():
                # Final segment after the last allowed reflection
                self._emit(origin, hit_point, wall.id, 'cap')
                self.termination = 'bounce_cap'
                break

            policy = get_policy(wall.kind)
            normals = [geometry.facing_normal(direction, w.p1, w.p2) for w in same_kind]
            outcome = policy.on_vertex_incident(direction, hit_point, normals, self.epsilon)
            self._emit(origin, hit_point, wall.id, outcome.interaction)

            if outcome.terminate:
                self.termination = 'absorbed'
                break

            if outcome.counts_as_bounce:
                self.bounce_count += 1
            origin = outcome.origin
            direction = outcome.direction
            last_wall_ids = {w.id for w in hit_walls}

        if self.termination == 'bounce_cap':
            self.warning = (f"Simulation stopped: maximum bounce count "
                            f"({self.max_bounces}) reached")
        if self.warning:
            logger.debug(self.warning)

        return self.beam_segments

    def _bounce_cap_reached(self) -> bool:
        return self.bounce_count >= self.max_bounces

    def _usable_walls(self, walls: Tuple[WallSegment, ...]) -> List[WallSegment]:
        """Drop degenerate walls for this run and remember their ids."""
        usable = []
        for wall in walls:
            try:
                geometry.segment_normal(wall.p1, wall.p2)
            except DegenerateGeometry as e:
                self.skipped_wall_ids.append(wall.id)
                logger.debug(f"Skipping degenerate wall {wall.id}: {e}")
                continue
            usable.append(wall)
        if self.skipped_wall_ids:
            logger.info(f"Skipped {len(self.skipped_wall_ids)} degenerate wall(s): "
                        f"{self.skipped_wall_ids}")
        return usable

    def _find_nearest_hit(
        self,
        origin: Point,
        direction: Point,
        walls: List[WallSegment],
        exclude_wall_ids: Set[int]
    ) -> Optional[Tuple[Point, List[WallSegment]]]:
        """
        Nearest hit along the ray, ignoring the walls the ray just left.

        Every wall that the beam meets at the hit point is returned: walls
        hit within epsilon of the nearest t, and walls with an end node
        within epsilon of the hit point (a beam aimed at a node meets all
        the walls joined there). Walls are listed in snapshot order.

        Returns:
            (hit_point, walls) or None if no wall is hit
        """
        hits: List[Tuple[float, Point, WallSegment]] = []
        for wall in walls:
            if wall.id in exclude_wall_ids:
                continue
            try:
                result = geometry.intersect_ray_segment(origin, direction, wall.p1, wall.p2,
                                                        self.epsilon,
                                                        endpoint_slack=self.epsilon)
            except DegenerateGeometry as e:
                if wall.id not in self.skipped_wall_ids:
                    self.skipped_wall_ids.append(wall.id)
                    logger.debug(f"Skipping degenerate wall {wall.id}: {e}")
                continue
            if result is None:
                continue
            t, point = result
            if self.verbose >= 2:
                print(f"    candidate wall {wall.id}: t={t:.6f} at ({point.x:.4f}, {point.y:.4f})")
            hits.append((t, point, wall))

        if not hits:
            return None

        nearest_t, hit_point, _ = min(hits, key=lambda h: h[0])
        hit_ids = {wall.id for t, _, wall in hits if t - nearest_t <= self.epsilon}
        for wall in walls:
            if wall.id in hit_ids or wall.id in exclude_wall_ids:
                continue
            if self._meets_at_node(wall, hit_point, direction):
                hit_ids.add(wall.id)

        hit_walls = [wall for wall in walls if wall.id in hit_ids]
        if len(hit_walls) > 1 and self.verbose >= 2:
            print(f"    node hit at ({hit_point.x:.4f}, {hit_point.y:.4f}): "
                  f"walls {[w.id for w in hit_walls]}")
        return hit_point, hit_walls

    def _meets_at_node(self, wall: WallSegment, point: Point, direction: Point) -> bool:
        """True if an end of the wall lies at the point and the ray is not along the wall."""
        if min(geometry.distance(wall.p1, point), geometry.distance(wall.p2, point)) > self.epsilon:
            return False
        s = geometry.sub(wall.p2, wall.p1)
        return abs(geometry.cross(direction, s)) > PARALLEL_THRESHOLD * geometry.length(s)

    @staticmethod
    def _deciding_walls(hit_walls: List[WallSegment]) -> Tuple[WallSegment, List[WallSegment]]:
        """
        Pick the walls whose kind decides the outcome at a hit.

        Absorbing beats mirror, mirror beats transparent. Returns the first
        deciding wall (its id goes on the segment) and all walls of its kind.
        """
        for kind in HIT_PRECEDENCE:
            same_kind = [w for w in hit_walls if w.kind == kind]
            if same_kind:
                return same_kind[0], same_kind
        return hit_walls[0], hit_walls

    def _emit(self, p1: Point, p2: Point, wall_id: Optional[int], interaction: str) -> None:
        bounce_index = self.bounce_count
        parent = self.beam_segments[-1].uuid if self.beam_segments else None
        segment = BeamSegment(
            p1=p1,
            p2=p2,
            bounce_index=bounce_index,
            brightness=self.emitter.brightness * self.intensity_fn(bounce_index),
            color=tuple(self.color_fn(bounce_index)),
            wall_id=wall_id,
            interaction=interaction,
            parent_uuid=parent,
        )
        self.beam_segments.append(segment)
        self.iteration_count += 1
        if self.verbose >= 1:
            print(f"### SIMULATOR segment {self.iteration_count - 1}: "
                  f"({p1.x:.4f}, {p1.y:.4f}) -> ({p2.x:.4f}, {p2.y:.4f}) "
                  f"[{interaction}, bounce {bounce_index}]")

    def _emit_escape(self, origin: Point, direction: Point) -> None:
        end = geometry.add(origin, geometry.scale(direction, self.escape_distance))
        self._emit(origin, end, None, 'escape')


def trace_beam(scene: 'Scene', emitter: 'Emitter', **settings) -> List[BeamSegment]:
    """Run one Simulator over the scene and return its segments."""
    return Simulator(scene, emitter, **settings).run()
