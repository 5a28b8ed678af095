from __future__ import annotations

import numpy as np
import pytest

from sweepform.errors import ConfigurationError, DegenerateGeometryError
from sweepform.modeling import (
    DoubleMobius,
    FigureEightKnot,
    FunctionFamily,
    Mobius,
    Placement,
    SaddleTile,
    Topology,
    TrefoilKnot,
    TwistColumn,
    WaveTile,
    make_family,
)
from sweepform.modeling.families import topology_for_twists


@pytest.mark.parametrize(
    ("twists", "expected"),
    [
        (1, Topology.CLOSED_DOUBLE),
        (2, Topology.CLOSED_SINGLE),
        (3, Topology.CLOSED_DOUBLE),
        (4, Topology.CLOSED_SINGLE),
        (5, Topology.CLOSED_DOUBLE),
    ],
)
def test_mobius_topology_follows_twist_parity(twists, expected):
    family = Mobius(radius=40.0, width=15.0, twists=twists)
    assert family.topology is expected
    assert family.half_twists == twists
    assert topology_for_twists(twists) is expected


def test_declared_topologies():
    assert TwistColumn().topology is Topology.OPEN
    assert WaveTile().topology is Topology.OPEN
    assert SaddleTile().topology is Topology.OPEN
    assert DoubleMobius().topology is Topology.CLOSED_SINGLE
    assert DoubleMobius().half_twists == 2
    assert TrefoilKnot().topology is Topology.CLOSED_SINGLE
    assert FigureEightKnot().topology is Topology.CLOSED_SINGLE


@pytest.mark.parametrize("twists", [0, -1, 1.5, True, "two"])
def test_mobius_rejects_bad_twist_counts(twists):
    with pytest.raises(ConfigurationError):
        Mobius(twists=twists)


@pytest.mark.parametrize(
    "factory",
    [
        lambda: Mobius(radius=0.0),
        lambda: DoubleMobius(radius=0.0),
        lambda: TrefoilKnot(radius=0.0),
        lambda: FigureEightKnot(radius=0.0),
    ],
)
def test_zero_radius_is_degenerate(factory):
    with pytest.raises(DegenerateGeometryError) as info:
        factory()
    assert info.value.parameter == "radius"


@pytest.mark.parametrize("radius", [-5.0, np.nan, np.inf])
def test_invalid_radius_is_configuration_error(radius):
    with pytest.raises(ConfigurationError) as info:
        TrefoilKnot(radius=radius)
    assert not isinstance(info.value, DegenerateGeometryError)


def test_mobius_strip_must_clear_axis():
    with pytest.raises(DegenerateGeometryError) as info:
        Mobius(radius=10.0, width=20.0)
    assert info.value.parameter == "width"


def test_twist_column_rejects_collapsed_top():
    with pytest.raises(DegenerateGeometryError) as info:
        TwistColumn(top_scale=0.0)
    assert info.value.parameter == "top_scale"
    with pytest.raises(DegenerateGeometryError):
        TwistColumn(height=0.0)


def test_saddle_rejects_full_warp():
    with pytest.raises(DegenerateGeometryError) as info:
        SaddleTile(warp=1.0)
    assert info.value.parameter == "warp"


def test_twist_column_placement():
    family = TwistColumn(height=10.0, twist_degrees=90.0, top_scale=0.5)
    assert np.allclose(family.evaluate(0.0).matrix, np.eye(4))
    assert np.allclose(family.evaluate(1.0).apply([[1.0, 0.0]]), [[0.0, 0.5, 10.0]])


def test_twist_column_wave_shifts_x():
    family = TwistColumn(height=10.0, twist_degrees=0.0, top_scale=1.0, wave_amplitude=3.0, wave_frequency=1.0)
    assert np.allclose(family.evaluate(0.25).offset, [3.0, 0.0, 2.5])


def test_wave_and_saddle_placements():
    wave = WaveTile(height=20.0, amplitude=4.0, cycles=2.0)
    assert np.allclose(wave.evaluate(0.125).offset, [4.0, 0.0, 2.5])
    saddle = SaddleTile(height=20.0, warp=0.3)
    assert np.allclose(saddle.evaluate(1.0).apply([[1.0, 1.0]]), [[1.3, 0.7, 20.0]])
    assert np.allclose(saddle.evaluate(0.0).apply([[1.0, 1.0]]), [[0.7, 1.3, 0.0]])


def test_tiles_never_rotate():
    for family in (WaveTile(), SaddleTile()):
        for progress in (0.0, 0.3, 0.9):
            linear = family.evaluate(progress).linear
            assert np.allclose(linear, np.diag(np.diag(linear)))


@pytest.mark.parametrize("family", [Mobius(), DoubleMobius()])
def test_band_starts_offset_on_sweep_circle(family):
    assert np.allclose(family.evaluate(0.0).offset, [40.0 + 15.0 / 4.0, 0.0, 0.0])


def test_mobius_profile_stands_across_tangent():
    placement = Mobius().evaluate(0.0)
    assert np.allclose(placement.apply([[1.0, 0.0], [0.0, 1.0]]) - placement.offset, [[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])


@pytest.mark.parametrize("family", [TrefoilKnot(radius=30.0), FigureEightKnot(radius=30.0)])
def test_knot_frames_are_orthonormal_and_follow_tangent(family):
    for progress in (0.0, 0.13, 0.5, 0.77):
        placement = family.evaluate(progress)
        linear = placement.linear
        assert np.allclose(linear.T @ linear, np.eye(3), atol=1e-9)
        assert np.linalg.det(linear) == pytest.approx(1.0)
        step = 1e-6
        chord = family.evaluate(progress + step).offset - family.evaluate(progress - step).offset
        tangent = chord / np.linalg.norm(chord)
        assert np.dot(placement.plane_normal(), tangent) == pytest.approx(1.0, abs=1e-6)


def test_trefoil_is_scaled_to_radius():
    family = TrefoilKnot(radius=30.0)
    distances = [np.linalg.norm(family.evaluate(p).offset) for p in np.linspace(0.0, 1.0, 241)]
    assert max(distances) == pytest.approx(30.0)


def test_make_family_dispatches_by_name():
    family = make_family("mobius", radius=40.0, width=15.0, twists=3)
    assert isinstance(family, Mobius)
    assert family.topology is Topology.CLOSED_DOUBLE
    assert isinstance(make_family(" Figure8 "), FigureEightKnot)


def test_make_family_rejects_unknown_names_and_params():
    with pytest.raises(ConfigurationError):
        make_family("klein-bottle")
    with pytest.raises(ConfigurationError):
        make_family("trefoil", twists=2)


def test_function_family_requires_callable():
    with pytest.raises(ConfigurationError):
        FunctionFamily(func=42)


def _identity(progress):
    return Placement.identity()


@pytest.mark.parametrize(
    ("topology", "half_twists"),
    [(Topology.CLOSED_DOUBLE, 0), (Topology.CLOSED_DOUBLE, 2), (Topology.CLOSED_SINGLE, 1)],
)
def test_function_family_topology_must_match_twist_parity(topology, half_twists):
    with pytest.raises(ConfigurationError):
        FunctionFamily(_identity, topology, half_twists)


def test_function_family_declares_half_twists():
    family = FunctionFamily(_identity, Topology.CLOSED_DOUBLE, 3)
    assert family.half_twists == 3
    assert family.topology is Topology.CLOSED_DOUBLE
    assert FunctionFamily(_identity, Topology.CLOSED_SINGLE, 2).half_twists == 2
    assert FunctionFamily(_identity).half_twists == 0
    with pytest.raises(ConfigurationError):
        FunctionFamily(_identity, Topology.OPEN, -1)
