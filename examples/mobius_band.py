"""Sweep a thin strip around a single-twist Möbius band and save it as STL."""

from __future__ import annotations

import logging
from pathlib import Path

from sweepform.io import write_stl
from sweepform.logging_config import setup_logging
from sweepform.mesh import analyze_mesh
from sweepform.modeling import Mobius, build_loft, make_rect


def build():
    profile = make_rect(size=(15.0, 2.0))
    loft = build_loft(profile, 120, Mobius(radius=40.0, width=15.0, twists=1))
    return loft.to_mesh()


if __name__ == "__main__":
    logger = setup_logging(level=logging.DEBUG)
    mesh = build()
    analysis = analyze_mesh(mesh)
    logger.info("%d faces, issues: %s", mesh.n_faces, analysis.issues() or "none")
    write_stl(mesh, Path("mobius_band.stl"))
