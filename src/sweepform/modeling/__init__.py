"""Modeling utilities: profiles, placements, transform families and lofting."""

from __future__ import annotations

from .placement import Placement, compose
from .profile import Profile, make_circle, make_ngon, make_polyline, make_rect, make_star
from .families import (
    FAMILIES,
    DoubleMobius,
    FigureEightKnot,
    FunctionFamily,
    Mobius,
    SaddleTile,
    Topology,
    TransformFamily,
    TrefoilKnot,
    TwistColumn,
    WaveTile,
    make_family,
)
from .loft import Loft, Slice, build_loft, loft_mesh, sweep
from .sculptures import modular_unit, topological_form, twisted_column

__all__ = [
    "Placement",
    "compose",
    "Profile",
    "make_circle",
    "make_ngon",
    "make_polyline",
    "make_rect",
    "make_star",
    "FAMILIES",
    "DoubleMobius",
    "FigureEightKnot",
    "FunctionFamily",
    "Mobius",
    "SaddleTile",
    "Topology",
    "TransformFamily",
    "TrefoilKnot",
    "TwistColumn",
    "WaveTile",
    "make_family",
    "Loft",
    "Slice",
    "build_loft",
    "loft_mesh",
    "sweep",
    "modular_unit",
    "topological_form",
    "twisted_column",
]
