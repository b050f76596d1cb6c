"""
===============================================================================
SCENE GRAPH TESTS
===============================================================================

Covers the node/wall arena:

- Walls reject unknown endpoints and self-loops without touching the scene
- Removing a node removes every wall attached to it
- Cycling a wall kind three times restores the original kind
- Snapshots are frozen: later edits never leak into them
- Duplicate walls, terminal-node creation, picking

Run with:
    python developer_tests/test_scene_graph.py
===============================================================================
"""

import sys
from pathlib import Path

# Add the src-python directory to the path
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from ray_cast_shapely.core.geometry import Point
from ray_cast_shapely.core.scene import InvalidEndpoint, Scene
from ray_cast_shapely.core.wall_policy import WallKind, get_policy, next_kind
from ray_cast_shapely.layouts import add_boundary_box


def _expect_invalid_endpoint(func, *args):
    try:
        func(*args)
    except InvalidEndpoint:
        return
    raise AssertionError(f"{func.__name__}{args} should raise InvalidEndpoint")


# =============================================================================
# WALL CREATION
# =============================================================================

def test_add_wall_resolves_coordinates():
    scene = Scene()
    a = scene.add_node((0, 0))
    b = scene.add_node((10, 5))
    w = scene.add_wall(a, b)
    walls = scene.walls()
    assert len(walls) == 1
    assert walls[0].id == w
    assert walls[0].p1 == Point(0, 0)
    assert walls[0].p2 == Point(10, 5)
    assert walls[0].kind == WallKind.MIRROR


def test_add_wall_unknown_endpoint():
    scene = Scene()
    a = scene.add_node((0, 0))
    _expect_invalid_endpoint(scene.add_wall, a, 99)
    _expect_invalid_endpoint(scene.add_wall, 99, a)
    assert scene.wall_count == 0, "Failed add_wall must not create a wall"
    assert scene.walls_of(a) == set()


def test_add_wall_self_loop():
    scene = Scene()
    a = scene.add_node((0, 0))
    _expect_invalid_endpoint(scene.add_wall, a, a)
    assert scene.wall_count == 0


def test_invalid_endpoint_is_value_error():
    assert issubclass(InvalidEndpoint, ValueError)


def test_duplicate_wall_returns_existing_id():
    scene = Scene()
    a = scene.add_node((0, 0))
    b = scene.add_node((1, 0))
    w1 = scene.add_wall(a, b, WallKind.ABSORBING)
    w2 = scene.add_wall(b, a, WallKind.MIRROR)
    assert w1 == w2
    assert scene.wall_count == 1
    assert scene.get_wall(w1).kind == WallKind.ABSORBING, "Existing wall is unchanged"


def test_add_wall_to_point_creates_terminal_node():
    scene = Scene()
    a = scene.add_node((0, 0))
    new_node, w = scene.add_wall_to_point(a, (30, 40), WallKind.TRANSPARENT)
    assert scene.node_count == 2
    assert scene.get_node(new_node).position == Point(30, 40)
    assert scene.wall_endpoints(w) == (Point(0, 0), Point(30, 40))
    assert scene.get_wall(w).kind == WallKind.TRANSPARENT


def test_add_wall_to_point_unknown_node_creates_nothing():
    scene = Scene()
    _expect_invalid_endpoint(scene.add_wall_to_point, 5, (1, 1))
    assert scene.node_count == 0
    assert scene.wall_count == 0


# =============================================================================
# REMOVAL
# =============================================================================

def test_remove_node_cascades():
    scene = Scene()
    nodes, walls = add_boundary_box(scene, 100, 50)
    scene.remove_node(nodes[0])

    assert scene.node_count == 3
    assert scene.wall_count == 2
    remaining = {w.id for w in scene.walls()}
    assert remaining == {walls[1], walls[2]}, f"Walls touching node 0 should be gone: {remaining}"
    for node in scene.nodes():
        assert walls[0] not in scene.walls_of(node.id)
        assert walls[3] not in scene.walls_of(node.id)


def test_remove_node_then_reconnect():
    scene = Scene()
    a = scene.add_node((0, 0))
    b = scene.add_node((1, 0))
    scene.add_wall(a, b)
    scene.remove_node(b)
    c = scene.add_node((2, 0))
    assert c != b, "Node ids are not reused"
    scene.add_wall(a, c)
    assert scene.wall_count == 1


def test_remove_unknown_is_noop():
    scene = Scene()
    a = scene.add_node((0, 0))
    scene.remove_node(42)
    scene.remove_wall(42)
    assert scene.node_count == 1
    assert scene.has_node(a)


def test_remove_wall_keeps_nodes():
    scene = Scene()
    a = scene.add_node((0, 0))
    b = scene.add_node((1, 0))
    w = scene.add_wall(a, b)
    scene.remove_wall(w)
    assert scene.wall_count == 0
    assert scene.node_count == 2
    # The pair is free again
    assert scene.add_wall(a, b) != w


# =============================================================================
# WALL KINDS
# =============================================================================

def test_cycle_wall_kind_order():
    scene = Scene()
    a = scene.add_node((0, 0))
    b = scene.add_node((1, 0))
    w = scene.add_wall(a, b)
    assert scene.cycle_wall_kind(w) == WallKind.ABSORBING
    assert scene.cycle_wall_kind(w) == WallKind.TRANSPARENT
    assert scene.cycle_wall_kind(w) == WallKind.MIRROR


def test_cycle_three_times_is_identity():
    for start in WallKind:
        scene = Scene()
        a = scene.add_node((0, 0))
        b = scene.add_node((1, 0))
        w = scene.add_wall(a, b, start)
        for _ in range(3):
            scene.cycle_wall_kind(w)
        assert scene.get_wall(w).kind == start, f"{start} did not round-trip"


def test_next_kind_and_policy_lookup():
    assert next_kind("mirror") == WallKind.ABSORBING
    for kind in WallKind:
        assert get_policy(kind).kind == kind
    try:
        get_policy("glass")
    except ValueError:
        pass
    else:
        raise AssertionError("Unknown kind should raise ValueError")


# =============================================================================
# SNAPSHOTS AND MOVES
# =============================================================================

def test_move_node_updates_walls_not_old_snapshot():
    scene = Scene()
    a = scene.add_node((0, 0))
    b = scene.add_node((10, 0))
    scene.add_wall(a, b)
    before = scene.snapshot()

    scene.move_node(b, (10, 10))
    scene.cycle_wall_kind(before.walls[0].id)

    assert before.walls[0].p2 == Point(10, 0), "Snapshot must not see the move"
    assert before.walls[0].kind == WallKind.MIRROR, "Snapshot must not see the kind change"
    assert scene.walls()[0].p2 == Point(10, 10)


def test_move_unknown_node_raises():
    scene = Scene()
    try:
        scene.move_node(3, (0, 0))
    except KeyError:
        pass
    else:
        raise AssertionError("Moving an unknown node should raise KeyError")


# =============================================================================
# PICKING
# =============================================================================

def test_node_and_wall_picking():
    scene = Scene()
    a = scene.add_node((0, 0))
    b = scene.add_node((100, 0))
    w = scene.add_wall(a, b)

    assert scene.node_at((3, 4)) == a, "Within the 8 px node radius"
    assert scene.node_at((50, 0)) is None
    assert scene.wall_at((50, 2)) == w, "Within half the 5 px wall thickness"
    assert scene.wall_at((50, 3)) is None


def test_display_name():
    assert Scene(name="Corridor").get_display_name() == "Corridor"
    scene = Scene()
    assert scene.get_display_name() == f"Scene_{scene.uuid[:8]}"


def run_all_tests():
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    failed = 0
    for test_func in tests:
        try:
            test_func()
            print(f"  [PASS] {test_func.__name__}")
        except Exception as e:
            failed += 1
            print(f"  [FAIL] {test_func.__name__}: {e}")
    print(f"\nResults: {len(tests) - failed}/{len(tests)} tests passed")
    return failed == 0


if __name__ == "__main__":
    sys.exit(0 if run_all_tests() else 1)
