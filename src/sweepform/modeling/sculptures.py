"""Ready-made sweeps: twisted columns, topological bands and knots, tiles.

These builders pick a profile, a family and a resolution, then hand them to
the loft engine with the tolerance and worker count from ``sweepform.cfg``.
"""

from __future__ import annotations

import logging

from sweepform._config import get_loft_settings
from sweepform.errors import ConfigurationError
from sweepform.mesh import Mesh, arrange_grid

from .families import (
    DoubleMobius,
    FigureEightKnot,
    Mobius,
    SaddleTile,
    TransformFamily,
    TrefoilKnot,
    TwistColumn,
    WaveTile,
)
from .loft import sweep
from .profile import Profile, make_circle, make_ngon, make_rect, make_star

logger = logging.getLogger(__name__)

BASE_SHAPES = ("circle", "square", "star", "hexagon")
SURFACE_TYPES = ("mobius", "double-mobius", "trefoil", "figure8")
UNIT_TYPES = ("wave", "saddle", "twist")

TILE_GAP = 2.0
TWIST_BLOCK_DEGREES = 45.0


def _base_shape(name: str) -> Profile:
    if name == "circle":
        return make_circle(radius=20.0, segments=32)
    if name == "square":
        return make_rect(size=(35.0, 35.0))
    if name == "star":
        return make_star(points=5, outer_radius=22.0, inner_radius=12.0)
    if name == "hexagon":
        return make_ngon(sides=6, radius=20.0)
    raise ConfigurationError(f"base_shape must be one of {list(BASE_SHAPES)}, got {name!r}.")


def _sweep_with_settings(profile: Profile, segments: int, family: TransformFamily) -> Mesh:
    settings = get_loft_settings()
    return sweep(
        profile,
        segments,
        family,
        tolerance=settings.closure_tolerance,
        workers=settings.workers,
    )


def twisted_column(
    height: float = 100.0,
    segments: int = 80,
    twist_degrees: float = 180.0,
    base_shape: str = "star",
    top_scale: float = 0.3,
    wave_amplitude: float = 0.0,
    wave_frequency: float = 2.0,
) -> Mesh:
    """Capped column that twists and tapers from its base shape upward."""

    profile = _base_shape(base_shape)
    family = TwistColumn(
        height=height,
        twist_degrees=twist_degrees,
        top_scale=top_scale,
        wave_amplitude=wave_amplitude,
        wave_frequency=wave_frequency,
    )
    logger.info("Twisted column: %s base, %g degrees over %g", base_shape, twist_degrees, height)
    return _sweep_with_settings(profile, segments, family)


def topological_form(
    surface_type: str = "mobius",
    radius: float = 40.0,
    width: float = 15.0,
    thickness: float = 2.0,
    segments: int = 120,
    twists: int = 1,
) -> Mesh:
    """Sweep a ``width x thickness`` strip around a band or knot.

    ``twists`` only applies to the ``mobius`` surface.
    """

    profile = make_rect(size=(width, thickness))
    if surface_type == "mobius":
        family: TransformFamily = Mobius(radius=radius, width=width, twists=twists)
    elif surface_type == "double-mobius":
        family = DoubleMobius(radius=radius, width=width)
    elif surface_type == "trefoil":
        family = TrefoilKnot(radius=radius)
    elif surface_type == "figure8":
        family = FigureEightKnot(radius=radius)
    else:
        raise ConfigurationError(f"surface_type must be one of {list(SURFACE_TYPES)}, got {surface_type!r}.")
    logger.info("Topological form: %s, %s", surface_type, family.topology.value)
    return _sweep_with_settings(profile, segments, family)


def modular_unit(
    unit_type: str = "wave",
    size: float = 40.0,
    height: float = 20.0,
    segments: int = 20,
    make_multiple: bool = False,
) -> Mesh:
    """Square stacking tile; ``make_multiple`` lays out a 3x3 array."""

    profile = make_rect(size=(size, size))
    if unit_type == "wave":
        family: TransformFamily = WaveTile(height=height, amplitude=height * 0.2, cycles=4.0 * height / size)
    elif unit_type == "saddle":
        family = SaddleTile(height=height, warp=0.3)
    elif unit_type == "twist":
        family = TwistColumn(height=height, twist_degrees=TWIST_BLOCK_DEGREES, top_scale=1.0)
    else:
        raise ConfigurationError(f"unit_type must be one of {list(UNIT_TYPES)}, got {unit_type!r}.")

    unit = _sweep_with_settings(profile, segments, family)
    if not make_multiple:
        return unit
    return arrange_grid(unit, spacing=size + TILE_GAP, count=3)


__all__ = [
    "BASE_SHAPES",
    "SURFACE_TYPES",
    "UNIT_TYPES",
    "modular_unit",
    "topological_form",
    "twisted_column",
]
