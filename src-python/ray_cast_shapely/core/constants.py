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
Constants used throughout the ray-casting sandbox.

Defaults for the propagation engine, the scene graph and the emitter live
here so that the geometry kernel, the wall policies and the simulator can
share them without circular imports.
"""

# Minimum ray parameter for a valid hit, and the nudge applied to a ray
# origin after a mirror or transparent wall so the same wall is not hit again
MIN_RAY_SEGMENT_LENGTH = 1e-6

# Relative threshold on |cross(r, s)| / (|r| |s|) below which a ray and a
# segment are treated as parallel (sine of the angle between them)
PARALLEL_THRESHOLD = 1e-12

# Shortest wall the kernel accepts; shorter walls are degenerate
MIN_WALL_LENGTH = 1e-9

# Propagation defaults
DEFAULT_MAX_BOUNCES = 64        # Mirror reflections before the beam is cut
DEFAULT_MAX_ITERATIONS = 256    # Overall segment budget (mirror + transparent hits)
DEFAULT_ESCAPE_DISTANCE = 10000.0  # Length of the segment drawn when nothing is hit

# Scene defaults
NODE_RADIUS = 8.0       # Hit radius of a node for picking
WALL_THICKNESS = 5.0    # Display thickness of a wall, also its pick width

# Emitter defaults
DEFAULT_BEAM_THICKNESS = 5.0
DEFAULT_BRIGHTNESS = 1.0
