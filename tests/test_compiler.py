import math

import numpy as np
import pytest

from autonavigation.compiler import PathCompiler
from autonavigation.config import NavigationSettings
from autonavigation.errors import InvalidDuration, UnknownNode, UnresolvedReferenceNode
from autonavigation.geometry import forward_vector, quaternions_close
from autonavigation.instructions import PathInstruction
from autonavigation.path import Path
from autonavigation.state import CurveType

from conftest import AnchoredCamera, FakeCamera, FakeNode


@pytest.fixture
def compiler(scene, camera):
    return PathCompiler(scene, camera)


def test_single_instruction_to_earth(compiler, earth):
    path = compiler.compile([PathInstruction("Earth", 5.0)])

    assert len(path) == 1
    segment = path[0]
    assert segment.duration == 5.0
    assert segment.start_time == 0.0

    direction = (np.zeros(3) - earth.position) / np.linalg.norm(earth.position)
    expected = earth.position + direction * (earth.radius + 2.0 * earth.radius)
    np.testing.assert_allclose(segment.end.position, expected)
    np.testing.assert_allclose(segment.end.position, [0.0, 0.0, -70.0])


def test_end_rotation_looks_at_target(compiler, moon):
    path = compiler.compile([PathInstruction("Moon", 2.0)])
    end = path[0].end

    to_node = moon.position - end.position
    np.testing.assert_allclose(forward_vector(end.rotation), to_node / np.linalg.norm(to_node), atol=1e-12)
    assert np.linalg.norm(end.rotation) == pytest.approx(1.0)
    assert end.reference_node == "Moon"


def test_start_state_is_live_camera_pose(scene):
    camera = FakeCamera(position=(5.0, 5.0, 5.0), rotation=(0.0, 0.0, 1.0, 0.0))
    path = PathCompiler(scene, camera).compile([PathInstruction("Earth")])

    np.testing.assert_allclose(path[0].start.position, [5.0, 5.0, 5.0])
    assert quaternions_close(path[0].start.rotation, [0.0, 0.0, 1.0, 0.0])


def test_missing_duration_uses_default(compiler):
    path = compiler.compile([PathInstruction("Earth")])
    assert path[0].duration == 5.0

    custom = PathCompiler(compiler.scene, compiler.camera, NavigationSettings(default_duration=2.5))
    assert custom.compile([PathInstruction("Earth")])[0].duration == 2.5


def test_segments_are_chained_and_contiguous(compiler):
    path = compiler.compile([
        PathInstruction("Earth", 3.0),
        PathInstruction("Moon", 4.0),
        PathInstruction("Earth", 1.5),
    ])

    assert path[0].start_time == 0.0
    for previous, current in zip(path.segments, path.segments[1:]):
        assert current.start_time == previous.start_time + previous.duration
        assert current.start is previous.end
    assert path.total_duration == pytest.approx(8.5)


def test_unknown_node_reports_instruction_index(compiler):
    with pytest.raises(UnknownNode) as excinfo:
        compiler.compile([PathInstruction("Earth", 1.0), PathInstruction("Pluto", 1.0)])

    assert excinfo.value.instruction_index == 1
    assert excinfo.value.identifier == "Pluto"
    assert excinfo.value.to_payload()["error_code"] == "UNKNOWN_NODE"


@pytest.mark.parametrize("duration", [0.0, -2.0, math.inf, "soon"])
def test_invalid_duration_reports_instruction_index(compiler, duration):
    with pytest.raises(InvalidDuration) as excinfo:
        compiler.compile([PathInstruction("Earth", 1.0), PathInstruction("Moon", 1.0), PathInstruction("Earth", duration)])

    assert excinfo.value.instruction_index == 2


def test_explicit_position_is_node_local(scene, camera):
    c, s = math.cos(math.pi / 2), math.sin(math.pi / 2)
    tilted = scene.add(FakeNode("Station", (10.0, 0.0, 0.0), 1.0,
                                rotation=[[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]]))

    path = PathCompiler(scene, camera).compile([PathInstruction("Station", 1.0, (4.0, 0.0, 0.0))])

    np.testing.assert_allclose(path[0].end.position, tilted.position + np.array([0.0, 4.0, 0.0]), atol=1e-12)


def test_camera_at_node_centre_backs_out_along_view_direction(scene, earth):
    camera = FakeCamera(position=earth.position)
    path = PathCompiler(scene, camera).compile([PathInstruction("Earth", 1.0)])

    # Identity camera looks down -Z, so backing out moves along +Z
    np.testing.assert_allclose(path[0].end.position, earth.position + np.array([0.0, 0.0, 30.0]))


def test_anchor_node_is_start_reference(scene):
    camera = AnchoredCamera(anchor="Moon")
    path = PathCompiler(scene, camera).compile([PathInstruction("Earth", 1.0)])
    assert path[0].start.reference_node == "Moon"


def test_first_target_is_start_reference_without_anchor(compiler):
    path = compiler.compile([PathInstruction("Moon", 1.0)])
    assert path[0].start.reference_node == "Moon"


def test_unanchored_first_leg_is_straight(compiler):
    path = compiler.compile([PathInstruction("Earth", 1.0), PathInstruction("Moon", 1.0)])

    assert path[0].curve_type is CurveType.LINEAR
    assert path[1].curve_type is CurveType.BEZIER
    for t in np.linspace(0.0, 1.0, 11):
        assert -70.0 - 1e-9 <= path[0].position_at(t)[2] <= 1e-9


@pytest.mark.parametrize("anchor,expected", [("Earth", CurveType.BEZIER), (None, CurveType.LINEAR)])
def test_first_leg_curve_follows_anchor(scene, anchor, expected):
    camera = AnchoredCamera(anchor=anchor)
    path = PathCompiler(scene, camera).compile([PathInstruction("Moon", 1.0)])
    assert path[0].curve_type is expected


def test_unresolvable_anchor_fails_bezier_construction(scene):
    camera = AnchoredCamera(anchor="Vulcan")
    with pytest.raises(UnresolvedReferenceNode) as excinfo:
        PathCompiler(scene, camera).compile([PathInstruction("Earth", 1.0)])
    assert excinfo.value.instruction_index == 0


def test_linear_curve_setting(scene, camera):
    settings = NavigationSettings(curve_type=CurveType.LINEAR)
    path = PathCompiler(scene, camera, settings).compile([PathInstruction("Earth", 1.0)])
    assert path[0].curve_type is CurveType.LINEAR
    assert path[0].control_points == ()


def test_compile_continues_previous_path(compiler):
    first = compiler.compile([PathInstruction("Earth", 2.0)])
    extended = compiler.compile([PathInstruction("Moon", 3.0)], previous=first)

    assert len(extended) == 2
    assert extended[1].start_time == 2.0
    assert extended[1].start is first[0].end
    assert len(first) == 1


def test_empty_instruction_list_returns_base(compiler):
    assert len(compiler.compile([])) == 0
    previous = compiler.compile([PathInstruction("Earth", 1.0)])
    assert compiler.compile([], previous=previous) is previous


def test_compute_target_position(compiler, moon):
    position = compiler.compute_target_position(moon, [60.0, 10.0, -100.0])
    np.testing.assert_allclose(position, [60.0, 6.0, -100.0])


def test_camera_state_from_target(compiler):
    state = compiler.camera_state_from_target([0.0, 0.0, 10.0], [0.0, 0.0, 0.0], "Earth", [0.0, 1.0, 0.0])
    assert state.reference_node == "Earth"
    assert quaternions_close(state.rotation, [1.0, 0.0, 0.0, 0.0])


def test_compile_returns_path(compiler):
    assert isinstance(compiler.compile([PathInstruction("Earth", 1.0)]), Path)
