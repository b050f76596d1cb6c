"""
===============================================================================
SVG SNAPSHOT TESTS
===============================================================================

Renders a scene, its emitter and a traced beam with SVGRenderer and checks
the data-* metadata, viewbox clipping and file output.

Run with:
    python developer_tests/test_svg_snapshot.py
===============================================================================
"""

import sys
import tempfile
from pathlib import Path

# Add the src-python directory to the path
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from ray_cast_shapely.core.emitter import Emitter
from ray_cast_shapely.core.geometry import Point
from ray_cast_shapely.core.ray import BeamSegment
from ray_cast_shapely.core.scene import Scene
from ray_cast_shapely.core.simulator import Simulator
from ray_cast_shapely.core.svg_renderer import SVGRenderer
from ray_cast_shapely.core.wall_policy import WallKind
from ray_cast_shapely.layouts import add_boundary_box


def build_demo():
    scene = Scene(name="SVG demo")
    _, walls = add_boundary_box(scene, 400, 300)
    scene.set_wall_kind(walls[2], WallKind.ABSORBING)
    a = scene.add_node((200, 50))
    b = scene.add_node((200, 250))
    scene.add_wall(a, b, WallKind.TRANSPARENT)
    emitter = Emitter((50, 150), (1, 0.23))
    segments = Simulator(scene, emitter, max_bounces=6).run()
    return scene, emitter, segments


def test_draw_scene_metadata():
    scene, emitter, segments = build_demo()
    renderer = SVGRenderer(width=400, height=300)
    assert renderer.draw_scene(scene, emitter, segments, show_ids=True)
    svg = renderer.to_string()

    assert 'id="wall-0"' in svg
    assert 'data-kind="mirror"' in svg
    assert 'data-kind="absorbing"' in svg
    assert 'data-kind="transparent"' in svg
    assert 'id="emitter"' in svg
    assert 'data-bounce-index="0"' in svg
    assert 'data-interaction="transmit"' in svg
    assert svg.count('class="beam ') == len(segments)


def test_clip_to_viewbox():
    renderer = SVGRenderer(width=800, height=600)
    p1, p2 = renderer._clip_to_viewbox(Point(-100, 50), Point(900, 50))
    assert abs(p1.x) < 1e-9 and p1.y == 50.0
    assert abs(p2.x - 800.0) < 1e-9 and p2.y == 50.0

    outside = renderer._clip_to_viewbox(Point(-100, -50), Point(-10, -5))
    assert outside == (None, None)


def test_beam_segment_outside_viewbox_is_skipped():
    renderer = SVGRenderer(width=100, height=100)
    seg = BeamSegment(Point(200, 200), Point(300, 300))
    assert renderer.draw_beam_segment(seg) is None
    assert 'beam-' not in renderer.to_string()


def test_escape_segment_is_clipped():
    renderer = SVGRenderer(width=100, height=100)
    segments = Simulator(Scene(), Emitter((50, 50), (1, 0))).run()
    line = renderer.draw_beam_segment(segments[0])
    assert line is not None
    assert abs(float(line["x2"]) - 100.0) < 1e-9


def test_save():
    scene, emitter, segments = build_demo()
    renderer = SVGRenderer(width=400, height=300)
    renderer.draw_scene(scene, emitter, segments)
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "snapshot.svg"
        renderer.save(str(path))
        content = path.read_text(encoding="utf-8")
    assert "<svg" in content
    assert "layer-rays" in content


if __name__ == "__main__":
    failed = 0
    for name, func in sorted(globals().items()):
        if name.startswith("test_") and callable(func):
            try:
                func()
                print(f"  [PASS] {name}")
            except Exception as e:
                failed += 1
                print(f"  [FAIL] {name}: {e}")
    sys.exit(1 if failed else 0)
