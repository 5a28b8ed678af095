from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from sweepform.errors import InvalidProfileError
from sweepform.validation import require_count, require_positive


def _to_vec2(value: Sequence[float]) -> np.ndarray:
    arr = np.asarray(value, dtype=float).reshape(2)
    return arr


def _signed_area(points: np.ndarray) -> float:
    if points.shape[0] < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


@dataclass(frozen=True, eq=False)
class Profile:
    """A 2D cross-section: ordered points in the reference XY plane.

    The point array is read-only and shared by every slice of a loft; slices
    only ever carry a placement and a reference back to this object.
    """

    points: np.ndarray
    closed: bool = True

    def __post_init__(self) -> None:
        try:
            arr = np.array(self.points, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidProfileError("Profile points must be numeric 2D coordinates.") from exc
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise InvalidProfileError("Profile points must be an Nx2 array.")
        if not np.all(np.isfinite(arr)):
            raise InvalidProfileError("Profile points must be finite.")
        if self.closed and arr.shape[0] > 1 and np.allclose(arr[0], arr[-1]):
            arr = arr[:-1]
        arr.setflags(write=False)
        object.__setattr__(self, "points", arr)
        object.__setattr__(self, "closed", bool(self.closed))

    @classmethod
    def from_points(
        cls,
        points: Iterable[Sequence[float]],
        closed: bool = True,
        ccw: bool = True,
    ) -> "Profile":
        """Build a profile, ordering ring profiles counter-clockwise when ``ccw``."""

        profile = cls(np.asarray(list(points), dtype=float), closed=closed)
        if closed and ccw and profile.signed_area < 0:
            return profile.reversed()
        return profile

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    @property
    def n_edges(self) -> int:
        if self.closed:
            return self.n_points
        return max(self.n_points - 1, 0)

    @property
    def signed_area(self) -> float:
        if not self.closed:
            return 0.0
        return _signed_area(self.points)

    @property
    def center(self) -> np.ndarray:
        return self.points.mean(axis=0)

    def reversed(self) -> "Profile":
        return Profile(self.points[::-1].copy(), closed=self.closed)


def make_rect(
    size: Sequence[float] = (1.0, 1.0),
    center: Sequence[float] = (0.0, 0.0),
) -> Profile:
    sx = require_positive("size[0]", size[0])
    sy = require_positive("size[1]", size[1])
    cx, cy = _to_vec2(center)
    hx, hy = sx / 2.0, sy / 2.0
    points = [
        (cx - hx, cy - hy),
        (cx + hx, cy - hy),
        (cx + hx, cy + hy),
        (cx - hx, cy + hy),
    ]
    return Profile.from_points(points, closed=True)


def make_ngon(
    sides: int = 6,
    radius: float = 0.5,
    center: Sequence[float] = (0.0, 0.0),
) -> Profile:
    sides = require_count("sides", sides, 3)
    radius = require_positive("radius", radius)
    center_vec = _to_vec2(center)
    angles = np.linspace(0.0, 2 * np.pi, sides, endpoint=False)
    points = np.column_stack([np.cos(angles), np.sin(angles)]) * radius
    return Profile.from_points(points + center_vec, closed=True)


def make_circle(
    radius: float = 0.5,
    center: Sequence[float] = (0.0, 0.0),
    segments: int = 32,
) -> Profile:
    """Polygonal circle; ``segments`` sets the boundary point count."""

    return make_ngon(sides=segments, radius=radius, center=center)


def make_star(
    points: int = 5,
    outer_radius: float = 1.0,
    inner_radius: float = 0.5,
    center: Sequence[float] = (0.0, 0.0),
) -> Profile:
    tips = require_count("points", points, 3)
    outer = require_positive("outer_radius", outer_radius)
    inner = require_positive("inner_radius", inner_radius)
    angles = np.linspace(0.0, 2 * np.pi, tips * 2, endpoint=False)
    radii = np.tile([outer, inner], tips)
    coords = np.column_stack([np.cos(angles), np.sin(angles)]) * radii[:, None]
    return Profile.from_points(coords + _to_vec2(center), closed=True)


def make_polyline(
    points: Iterable[Sequence[float]],
    closed: bool = False,
) -> Profile:
    pts = list(points)
    if len(pts) < 2:
        raise InvalidProfileError("make_polyline requires at least two points.")
    return Profile.from_points(pts, closed=closed)


__all__ = [
    "Profile",
    "make_circle",
    "make_ngon",
    "make_polyline",
    "make_rect",
    "make_star",
]
