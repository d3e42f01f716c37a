import pytest

from graphroom.geometry import (
    MIRRORED,
    SELF_LOOP,
    STRAIGHT,
    build_scene,
    edge_at,
    has_mirror,
    line_clip,
    mirror_offset,
    mirrored_edge_geometry,
    node_at,
    self_loop_geometry,
    self_loop_indices,
)
from graphroom.graph import Edge, GraphSnapshot, Node

RADIUS = 45


def approx_point(point):
    return pytest.approx(point, abs=1e-6)


class TestLineClip:

    def test_horizontal_segment(self):
        start, end = line_clip((0, 0), (200, 0), 45, 47)
        assert start == approx_point((45, 0))
        assert end == approx_point((153, 0))

    def test_coincident_points_stay_put(self):
        start, end = line_clip((5, 5), (5, 5), 10, 10)
        assert start == (5, 5)
        assert end == (5, 5)


class TestSelfLoops:

    def test_indices_are_dense_per_node(self):
        edges = [
            Edge("a", "1", "1"),
            Edge("x", "1", "2"),
            Edge("b", "1", "1"),
            Edge("c", "2", "2"),
            Edge("d", "1", "1"),
        ]
        indices = self_loop_indices(edges)

        assert indices == {"a": 0, "b": 1, "c": 0, "d": 2}
        assert sorted(v for k, v in indices.items() if k in "abd") == [0, 1, 2]

    def test_sides_alternate_by_parity(self):
        node = Node("1", 100, 100)
        right = self_loop_geometry(node, 0, radius=RADIUS)
        left = self_loop_geometry(node, 1, radius=RADIUS)

        assert right.kind == SELF_LOOP
        assert right.start == right.end == (145, 100)
        assert left.start == (55, 100)
        assert right.controls == ((185, 65), (169, 65))

    def test_second_pair_moves_outward(self):
        node = Node("1", 100, 100)
        first = self_loop_geometry(node, 0, radius=RADIUS)
        third = self_loop_geometry(node, 2, radius=RADIUS)

        assert third.start == first.start
        assert third.controls[0] == (207, 47)
        assert third.controls[0][0] > first.controls[0][0]
        assert third.label[1] < first.label[1]


class TestMirroredEdges:

    @pytest.fixture
    def nodes(self):
        return Node("1", 0, 0), Node("2", 200, 0)

    def test_detection(self):
        forward, back = Edge("e1", "1", "2", 1, True), Edge("e2", "2", "1", 1, True)
        other = Edge("e3", "1", "3", 1, True)
        edges = [forward, back, other]

        assert has_mirror(forward, edges)
        assert has_mirror(back, edges)
        assert not has_mirror(other, edges)
        assert not has_mirror(Edge("l", "1", "1"), [Edge("l", "1", "1"), Edge("m", "1", "1")])

    def test_offsets_have_opposite_sign(self):
        forward, back = Edge("e1", "1", "2"), Edge("e2", "2", "1")
        assert mirror_offset(forward, 200, RADIUS) == pytest.approx(27.5)
        assert mirror_offset(back, 200, RADIUS) == pytest.approx(-27.5)

    @pytest.mark.parametrize("separation, expected", [(50, 24), (2000, 60)])
    def test_offset_is_clamped(self, separation, expected):
        assert mirror_offset(Edge("e", "a", "b"), separation, RADIUS) == expected

    def test_curves_bow_to_opposite_sides(self, nodes):
        a, b = nodes
        forward = mirrored_edge_geometry(Edge("e1", "1", "2", 1, True), a, b, RADIUS)
        back = mirrored_edge_geometry(Edge("e2", "2", "1", 1, True), b, a, RADIUS)

        assert forward.kind == back.kind == MIRRORED
        assert forward.controls[0] == approx_point((100, 27.5))
        assert back.controls[0] == approx_point((100, -27.5))
        assert forward.label[1] > 0 > back.label[1]

    def test_endpoints_are_clipped_to_node_boundary(self, nodes):
        a, b = nodes
        geo = mirrored_edge_geometry(Edge("e1", "1", "2", 1, False), a, b, RADIUS)
        sx, sy = geo.start
        ex, ey = geo.end
        assert (sx ** 2 + sy ** 2) ** 0.5 == pytest.approx(RADIUS)
        assert ((ex - 200) ** 2 + ey ** 2) ** 0.5 == pytest.approx(RADIUS)


class TestScene:

    def test_kinds_for_mixed_graph(self):
        snapshot = GraphSnapshot(
            nodes=(Node("1", 0, 0), Node("2", 200, 0), Node("3", 0, 200)),
            edges=(
                Edge("ab", "1", "2", 1, True),
                Edge("ba", "2", "1", 1, True),
                Edge("ac", "1", "3", 1, False),
                Edge("loop", "3", "3", 2, True),
                Edge("dangling", "1", "9", 1, True),
            ),
        )
        scene = build_scene(snapshot, RADIUS)

        assert [g.edge_id for g in scene] == ["ab", "ba", "ac", "loop"]
        assert [g.kind for g in scene] == [MIRRORED, MIRRORED, STRAIGHT, SELF_LOOP]

    def test_directed_straight_edge_leaves_room_for_arrow(self):
        nodes = (Node("1", 0, 0), Node("2", 200, 0))
        directed = build_scene(GraphSnapshot(nodes, (Edge("e", "1", "2", 1, True),)), RADIUS)[0]
        plain = build_scene(GraphSnapshot(nodes, (Edge("e", "1", "2", 1, False),)), RADIUS)[0]

        assert plain.end == approx_point((155, 0))
        assert directed.end[0] < plain.end[0]
        assert plain.label == approx_point((100, -5))
        assert plain.path.startswith("M 45.00 0.00 L")

    def test_mirrored_kind_follows_has_mirror(self):
        snapshot = GraphSnapshot(
            nodes=(Node("1", 0, 0), Node("2", 200, 0)),
            edges=(Edge("a", "1", "2"), Edge("b", "1", "2"), Edge("c", "2", "1"), Edge("d", "2", "9")),
        )
        drawable = snapshot.edges[:3]
        scene = build_scene(snapshot, RADIUS)

        assert [g.kind == MIRRORED for g in scene] == [has_mirror(e, drawable) for e in drawable]
        assert all(g.kind == MIRRORED for g in scene)

    def test_scene_is_deterministic(self):
        snapshot = GraphSnapshot(
            nodes=(Node("1", 10, 10), Node("2", 90, 40)),
            edges=(Edge("a", "1", "2"), Edge("b", "2", "1"), Edge("c", "1", "1")),
        )
        assert build_scene(snapshot) == build_scene(snapshot)


def test_node_at_prefers_topmost():
    nodes = [Node("1", 0, 0), Node("2", 10, 0)]
    assert node_at(nodes, (5, 0), RADIUS).id == "2"
    assert node_at(nodes, (-40, 0), RADIUS).id == "1"
    assert node_at(nodes, (500, 500), RADIUS) is None


class TestEdgeHitTesting:

    @pytest.fixture
    def scene(self):
        return build_scene(GraphSnapshot(
            nodes=(Node("1", 0, 0), Node("2", 200, 0)),
            edges=(Edge("ab", "1", "2", 1, True), Edge("ba", "2", "1", 1, True), Edge("loop", "1", "1")),
        ), RADIUS)

    def test_points_follow_curve_ends(self, scene):
        for geo in scene:
            points = geo.points()
            assert points[0] == approx_point(geo.start)
            assert points[-1] == approx_point(geo.end)

    def test_mirrored_pair_is_distinguishable(self, scene):
        ab, ba = scene[0], scene[1]
        assert edge_at(scene, ab.points()[12]) == "ab"
        assert edge_at(scene, ba.points()[12]) == "ba"

    def test_self_loop_and_miss(self, scene):
        assert edge_at(scene, scene[2].points()[12]) == "loop"
        assert edge_at(scene, (100, 200)) is None
