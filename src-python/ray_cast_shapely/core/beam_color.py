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
Bounce-index to colour and intensity curves.

The simulator takes any callable ``f(bounce_index) -> value``; the functions
here are the defaults plus a couple of alternatives. Colours are RGBA tuples
of floats in [0, 1].
"""

from typing import Callable, Sequence, Tuple

import numpy as np

RGBA = Tuple[float, float, float, float]
IntensityFn = Callable[[int], float]
ColorFn = Callable[[int], RGBA]

RED: RGBA = (0.902, 0.161, 0.216, 1.0)
BEAM_GRADIENT_STOPS = (
    RED,
    (1.0, 0.631, 0.0, 1.0),    # orange
    (0.992, 0.976, 0.0, 1.0),  # yellow
)

# Intensity never drops below this floor, so long bounce chains stay visible
MIN_INTENSITY = 0.05
DEFAULT_DECAY = 0.9


def constant_intensity(bounce_index: int) -> float:
    return 1.0


def decay_intensity(bounce_index: int, decay: float = DEFAULT_DECAY,
                    floor: float = MIN_INTENSITY) -> float:
    """
    Geometric fall-off: decay ** bounce_index, clipped to [floor, 1].

    Args:
        bounce_index: Number of reflections before the segment
        decay: Per-bounce factor in (0, 1]
        floor: Lower clip

    Returns:
        Intensity in [floor, 1]
    """
    return float(np.clip(decay ** max(bounce_index, 0), floor, 1.0))


def solid_color(color: RGBA = RED) -> ColorFn:
    """Colour function that ignores the bounce index."""
    return lambda bounce_index: color


def gradient_color(stops: Sequence[RGBA] = BEAM_GRADIENT_STOPS,
                   span: int = 16) -> ColorFn:
    """
    Build a colour function that walks a piecewise-linear gradient.

    Bounce 0 gets the first stop, bounce ``span`` (and beyond) the last.

    Args:
        stops: RGBA gradient stops, evenly spaced
        span: Bounce index mapped to the last stop

    Returns:
        Callable mapping bounce_index to an RGBA tuple
    """
    if span <= 0:
        raise ValueError(f"Invalid span {span}: must be > 0")
    stops_arr = np.asarray(stops, dtype=float)
    if stops_arr.ndim != 2 or stops_arr.shape[1] != 4 or len(stops_arr) == 0:
        raise ValueError("Gradient stops must be a non-empty sequence of RGBA tuples")
    positions = np.linspace(0.0, float(span), len(stops_arr))

    def color_at(bounce_index: int) -> RGBA:
        x = float(np.clip(bounce_index, 0, span))
        channels = [np.interp(x, positions, stops_arr[:, c]) for c in range(4)]
        return tuple(float(v) for v in channels)

    return color_at


default_intensity: IntensityFn = decay_intensity
default_color: ColorFn = gradient_color()


def to_svg_color(color: RGBA) -> Tuple[str, float]:
    """Convert an RGBA float tuple to ('rgb(r,g,b)', opacity) for SVG."""
    rgb = np.clip(np.round(np.asarray(color[:3]) * 255), 0, 255).astype(int)
    return f"rgb({rgb[0]},{rgb[1]},{rgb[2]})", float(np.clip(color[3], 0.0, 1.0))
