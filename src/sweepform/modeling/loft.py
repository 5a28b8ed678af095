from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

import numpy as np

from sweepform.errors import (
    ClosureMismatchError,
    ConfigurationError,
    DegenerateGeometryError,
    InvalidProfileError,
)
from sweepform.mesh import Mesh
from sweepform.validation import require_count, require_finite, validate_profile

from ._triangulate import triangulate_profile
from .families import Topology, TransformFamily
from .placement import Placement
from .profile import Profile

logger = logging.getLogger(__name__)

CLOSURE_TOLERANCE = 1e-6

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, eq=False)
class Slice:
    """One placed copy of the shared base profile."""

    index: int
    progress: float
    placement: Placement
    profile: Profile

    @property
    def boundary(self) -> np.ndarray:
        return self.placement.apply(self.profile.points)


@dataclass(frozen=True, eq=False)
class Loft:
    profile: Profile
    slices: tuple[Slice, ...]
    topology: Topology
    segments: int

    def __post_init__(self) -> None:
        if len(self.slices) < 2:
            raise ConfigurationError("A loft requires at least two slices.")

    @property
    def n_slices(self) -> int:
        return len(self.slices)

    def boundaries(self) -> np.ndarray:
        """All slice boundaries stacked as (n_slices, n_points, 3)."""
        return np.stack([s.boundary for s in self.slices])

    def to_mesh(self, workers: int | None = None) -> Mesh:
        return loft_mesh(self, workers=workers)


def _map(func: Callable[[T], R], items: Iterable[T], workers: int | None) -> list[R]:
    if workers is not None and workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(func, items))
    return [func(item) for item in items]


def build_loft(
    profile: Profile,
    number_of_slices: int,
    family: TransformFamily,
    *,
    tolerance: float = CLOSURE_TOLERANCE,
    workers: int | None = None,
) -> Loft:
    """Evaluate ``family`` over evenly spaced progress values.

    ``number_of_slices`` is the sweep resolution: open and single-traversal
    lofts get ``n + 1`` slices over progress [0, 1], double-traversal lofts
    get ``2n + 1`` slices over [0, 2]. Closed lofts must end on their first
    slice within ``tolerance``.
    """

    if not isinstance(profile, Profile):
        raise InvalidProfileError("profile must be a Profile.")
    validate_profile(profile)
    segments = require_count("number_of_slices", number_of_slices, 1)
    if not isinstance(family, TransformFamily):
        raise ConfigurationError("family must be a TransformFamily; wrap callables in FunctionFamily.")
    tolerance = require_finite("tolerance", tolerance)
    if tolerance < 0:
        raise ConfigurationError("tolerance must be >= 0.")

    topology = family.topology
    if not isinstance(topology, Topology):
        raise ConfigurationError(f"{type(family).__name__}.topology must be a Topology.")
    traversals = topology.traversals
    steps = traversals * segments
    if topology.is_closed and steps < 3:
        raise ConfigurationError("Closed lofts need at least 3 segments per loop.")

    progresses = np.linspace(0.0, float(traversals), steps + 1)
    placements = _map(family.evaluate, progresses.tolist(), workers)

    slices = []
    for index, (progress, placement) in enumerate(zip(progresses, placements)):
        if not isinstance(placement, Placement):
            raise ConfigurationError(f"{type(family).__name__}.evaluate must return a Placement.")
        if not placement.is_finite():
            raise DegenerateGeometryError("progress", f"Placement at progress {progress:g} is not finite.")
        slices.append(Slice(index=index, progress=float(progress), placement=placement, profile=profile))

    loft = Loft(profile=profile, slices=tuple(slices), topology=topology, segments=segments)
    if topology.is_closed:
        _check_closure(loft, tolerance)

    logger.debug(
        "Built %s loft from %s: %d slices x %d points",
        topology.value,
        type(family).__name__,
        loft.n_slices,
        profile.n_points,
    )
    return loft


def _check_closure(loft: Loft, tolerance: float) -> None:
    first = loft.slices[0].boundary
    last = loft.slices[-1].boundary
    deviation = float(np.max(np.linalg.norm(last - first, axis=1)))
    if deviation > tolerance:
        raise ClosureMismatchError(
            f"{loft.topology.value} loft does not close: the last slice is {deviation:.3g} "
            f"away from the first (tolerance {tolerance:g}).",
            deviation,
        )


def _sweep_sign(loft: Loft) -> float:
    """+1 when the profile plane faces along the sweep, -1 when it faces back."""
    first, second = loft.slices[0], loft.slices[1]
    center = loft.profile.center
    direction = second.placement.apply(center)[0] - first.placement.apply(center)[0]
    normal = first.placement.plane_normal()
    scale = float(np.linalg.norm(normal) * np.linalg.norm(direction))
    dot = float(np.dot(normal, direction))
    if scale == 0.0 or abs(dot) <= 1e-12 * scale:
        return 1.0
    return 1.0 if dot > 0 else -1.0


def _ring_template(n_points: int, wrap: bool, flip: bool) -> np.ndarray:
    """Faces joining ring ``a`` (indices < n) to ring ``b`` (indices >= n)."""
    j = np.arange(n_points if wrap else n_points - 1)
    k = (j + 1) % n_points
    faces = np.empty((2 * j.size, 3), dtype=np.int64)
    faces[0::2] = np.column_stack([j, k, k + n_points])
    faces[1::2] = np.column_stack([j, k + n_points, j + n_points])
    if flip:
        faces = faces[:, [0, 2, 1]]
    return faces


def loft_mesh(loft: Loft, *, workers: int | None = None) -> Mesh:
    """Stitch consecutive slices into triangles and cap open ring sweeps."""

    profile = loft.profile
    count = profile.n_points
    closed_path = loft.topology.is_closed
    # A closed loft's final slice coincides with slice 0 and is welded onto it.
    rings = loft.slices[:-1] if closed_path else loft.slices
    n_rings = len(rings)
    n_pairs = loft.n_slices - 1

    vertices = np.vstack(_map(lambda s: s.boundary, rings, workers))
    sign = _sweep_sign(loft)
    template = _ring_template(count, profile.closed, flip=sign < 0)
    per_pair = template.shape[0]
    side = np.empty((n_pairs * per_pair, 3), dtype=np.int64)

    def stitch(pair: int) -> None:
        a = pair * count
        b = ((pair + 1) % n_rings) * count
        side[pair * per_pair : (pair + 1) * per_pair] = np.where(template < count, template + a, template - count + b)

    _map(stitch, range(n_pairs), workers)

    faces = [side]
    if not closed_path and profile.closed:
        cap = triangulate_profile(profile)
        flipped = cap[:, [0, 2, 1]]
        start_cap, end_cap = (flipped, cap) if sign > 0 else (cap, flipped)
        faces.append(start_cap)
        faces.append(end_cap + (n_rings - 1) * count)

    mesh = Mesh(
        vertices,
        np.vstack(faces),
        metadata={
            "topology": loft.topology.value,
            "slices": loft.n_slices,
            "profile_points": count,
        },
    )
    logger.debug("Stitched %d side triangles, %d total", side.shape[0], mesh.n_faces)
    return mesh


def sweep(
    profile: Profile,
    number_of_slices: int,
    family: TransformFamily,
    *,
    tolerance: float = CLOSURE_TOLERANCE,
    workers: int | None = None,
) -> Mesh:
    """Build a loft and return its mesh in one call."""

    loft = build_loft(profile, number_of_slices, family, tolerance=tolerance, workers=workers)
    return loft_mesh(loft, workers=workers)


__all__ = ["CLOSURE_TOLERANCE", "Loft", "Slice", "build_loft", "loft_mesh", "sweep"]
