from __future__ import annotations

import numpy as np
import pytest

from sweepform.modeling import Placement, compose


def test_translation_moves_profile_points_into_3d():
    moved = Placement.from_translation((1.0, 2.0, 3.0)).apply([[0.0, 0.0], [1.0, 1.0]])
    assert np.allclose(moved, [[1.0, 2.0, 3.0], [2.0, 3.0, 3.0]])


def test_rotation_axes_quarter_turn():
    quarter = np.pi / 2
    assert np.allclose(Placement.from_rotation_z(quarter).apply([[1.0, 0.0]]), [[0.0, 1.0, 0.0]])
    assert np.allclose(Placement.from_rotation_x(quarter).apply([[0.0, 1.0]]), [[0.0, 0.0, 1.0]])
    assert np.allclose(Placement.from_rotation_y(quarter).apply([[1.0, 0.0, 0.0]]), [[0.0, 0.0, -1.0]])


def test_compose_applies_rightmost_first():
    shift = Placement.from_translation((5.0, 0.0, 0.0))
    turn = Placement.from_rotation_z(np.pi / 2)
    assert np.allclose(compose(shift, turn).apply([[1.0, 0.0]]), [[5.0, 1.0, 0.0]])
    assert np.allclose(compose(turn, shift).apply([[1.0, 0.0]]), [[0.0, 6.0, 0.0]])
    assert np.allclose((shift @ turn).matrix, compose(shift, turn).matrix)


def test_compose_without_arguments_is_identity():
    assert np.allclose(compose().matrix, np.eye(4))


def test_placement_is_read_only():
    placement = Placement.identity()
    with pytest.raises(ValueError):
        placement.matrix[0, 0] = 2.0


def test_compose_does_not_alias_inputs():
    source = np.eye(4)
    placement = Placement(source)
    source[0, 3] = 9.0
    assert placement.offset[0] == 0.0


def test_scaling_and_plane_normal_mirroring():
    scaled = Placement.from_scaling((2.0, 3.0, 1.0))
    assert np.allclose(scaled.apply([[1.0, 1.0]]), [[2.0, 3.0, 0.0]])
    assert np.allclose(scaled.plane_normal(), [0.0, 0.0, 6.0])
    mirrored = Placement.from_scaling((-1.0, 1.0, 1.0))
    assert np.allclose(mirrored.plane_normal(), [0.0, 0.0, -1.0])


def test_from_frame_maps_axes():
    frame = Placement.from_frame((0, 1, 0), (0, 0, 1), (1, 0, 0), origin=(1, 1, 1))
    assert np.allclose(frame.apply([[1.0, 0.0], [0.0, 1.0]]), [[1.0, 2.0, 1.0], [1.0, 1.0, 2.0]])
    assert np.allclose(frame.plane_normal(), [1.0, 0.0, 0.0])


def test_invalid_translation_rejected():
    with pytest.raises(ValueError):
        Placement.from_translation((0.0, np.inf, 0.0))
    with pytest.raises(ValueError):
        Placement.from_translation((0.0, 1.0))
