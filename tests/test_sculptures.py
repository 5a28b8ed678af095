from __future__ import annotations

import numpy as np
import pytest

from sweepform.errors import ConfigurationError, DegenerateGeometryError
from sweepform.mesh import analyze_mesh
from sweepform.modeling import modular_unit, topological_form, twisted_column


def test_twisted_column_default_star():
    mesh = twisted_column(segments=80)
    m = 10
    assert mesh.n_faces == 2 * m * 80 + 2 * (m - 2)
    analysis = analyze_mesh(mesh)
    assert analysis.is_watertight
    assert mesh.bounds[5] == pytest.approx(100.0)


@pytest.mark.parametrize("shape", ["circle", "square", "star", "hexagon"])
def test_twisted_column_shapes_are_closed_solids(shape):
    mesh = twisted_column(segments=20, base_shape=shape, wave_amplitude=5.0)
    assert analyze_mesh(mesh).is_watertight
    assert mesh.signed_volume > 0


def test_twisted_column_rejects_unknown_shape():
    with pytest.raises(ConfigurationError):
        twisted_column(base_shape="heart")


@pytest.mark.parametrize(
    ("surface_type", "slices"),
    [("mobius", 121), ("double-mobius", 61), ("trefoil", 61), ("figure8", 61)],
)
def test_topological_forms(surface_type, slices):
    mesh = topological_form(surface_type=surface_type, segments=60)
    assert mesh.metadata["slices"] == slices
    analysis = analyze_mesh(mesh)
    assert analysis.is_watertight
    assert analysis.components == 1


def test_topological_form_validation():
    with pytest.raises(ConfigurationError):
        topological_form(surface_type="klein")
    with pytest.raises(DegenerateGeometryError):
        topological_form(radius=0.0)


@pytest.mark.parametrize("unit_type", ["wave", "saddle", "twist"])
def test_modular_units(unit_type):
    single = modular_unit(unit_type=unit_type)
    assert analyze_mesh(single).is_watertight
    grid = modular_unit(unit_type=unit_type, make_multiple=True)
    assert grid.n_faces == 9 * single.n_faces
    assert analyze_mesh(grid).components == 9


def test_twisted_block_turns_an_eighth_without_taper():
    mesh = modular_unit(unit_type="twist", size=40.0, height=20.0, segments=20)
    assert mesh.metadata["slices"] == 21
    top = mesh.vertices[-4:]
    assert np.allclose(top[:, 2], 20.0)
    assert np.allclose(np.linalg.norm(top[:, :2], axis=1), 20.0 * np.sqrt(2.0))
    # A 45 degree turn puts every top corner on an axis.
    assert np.allclose(np.abs(top[:, :2]).min(axis=1), 0.0, atol=1e-9)
    assert mesh.signed_volume == pytest.approx(40.0 * 40.0 * 20.0, rel=1e-2)


def test_modular_unit_rejects_boolean_units():
    with pytest.raises(ConfigurationError):
        modular_unit(unit_type="sphere-joint")
