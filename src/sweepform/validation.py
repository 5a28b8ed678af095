from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from sweepform.errors import ConfigurationError, DegenerateGeometryError, InvalidProfileError

if TYPE_CHECKING:
    from sweepform.modeling.profile import Profile


def require_finite(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number.") from exc
    if not math.isfinite(number):
        raise ConfigurationError(f"{name} must be finite.")
    return number


def require_positive(name: str, value: float) -> float:
    """Reject negative values outright; an exact zero collapses the geometry."""

    number = require_finite(name, value)
    if number < 0:
        raise ConfigurationError(f"{name} must be positive.")
    if number == 0:
        raise DegenerateGeometryError(name, f"{name} of 0 collapses the geometry.")
    return number


def require_count(name: str, value: int, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        else:
            raise ConfigurationError(f"{name} must be an integer.")
    count = int(value)
    if count < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}.")
    return count


def _within(a: np.ndarray, b: np.ndarray, x: np.ndarray, eps: float) -> np.ndarray:
    lo = np.minimum(a, b) - eps
    hi = np.maximum(a, b) + eps
    return np.all((x >= lo) & (x <= hi), axis=-1)


def _cross(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    return u[..., 0] * v[..., 1] - u[..., 1] * v[..., 0]


def _edges_cross(
    p: np.ndarray,
    q: np.ndarray,
    starts: np.ndarray,
    ends: np.ndarray,
    area_eps: float,
    length_eps: float,
) -> np.ndarray:
    d1 = _cross(q - p, starts - p)
    d2 = _cross(q - p, ends - p)
    d3 = _cross(ends - starts, p - starts)
    d4 = _cross(ends - starts, q - starts)
    proper = (d1 * d2 < 0) & (d3 * d4 < 0)
    touch = (
        ((np.abs(d1) <= area_eps) & _within(p, q, starts, length_eps))
        | ((np.abs(d2) <= area_eps) & _within(p, q, ends, length_eps))
        | ((np.abs(d3) <= area_eps) & _within(starts, ends, p[None, :], length_eps))
        | ((np.abs(d4) <= area_eps) & _within(starts, ends, q[None, :], length_eps))
    )
    return proper | touch


def validate_profile(profile: "Profile") -> None:
    """Check that a profile can be swept; raise InvalidProfileError otherwise."""

    pts = profile.points
    count = pts.shape[0]
    if count < 3:
        raise InvalidProfileError(f"Profile requires at least 3 points, got {count}.")

    extent = float(np.ptp(pts, axis=0).max())
    if extent == 0:
        raise InvalidProfileError("Profile points all coincide.")
    length_eps = extent * 1e-9
    area_eps = extent * extent * 1e-12

    ring = np.vstack([pts, pts[:1]]) if profile.closed else pts
    starts = ring[:-1]
    ends = ring[1:]
    lengths = np.linalg.norm(ends - starts, axis=1)
    if np.any(lengths <= length_eps):
        index = int(np.argmax(lengths <= length_eps))
        raise InvalidProfileError(f"Profile repeats point {index} consecutively.")

    if profile.closed and abs(profile.signed_area) <= area_eps:
        raise InvalidProfileError("Closed profile encloses zero area.")

    directions = ends - starts
    n_edges = starts.shape[0]
    pairs = [(i, i + 1) for i in range(n_edges - 1)]
    if profile.closed:
        pairs.append((n_edges - 1, 0))
    for a, b in pairs:
        turn = _cross(directions[a], directions[b])
        if abs(turn) <= area_eps and float(np.dot(directions[a], directions[b])) < 0:
            raise InvalidProfileError(f"Profile folds back on itself at edge {b}.")

    for i in range(n_edges - 2):
        last = n_edges - 1 if profile.closed and i == 0 else n_edges
        if i + 2 >= last:
            continue
        hits = _edges_cross(
            starts[i],
            ends[i],
            starts[i + 2 : last],
            ends[i + 2 : last],
            area_eps,
            length_eps,
        )
        if np.any(hits):
            j = i + 2 + int(np.argmax(hits))
            raise InvalidProfileError(f"Profile is not simple: edge {i} intersects edge {j}.")


__all__ = ["require_finite", "require_positive", "require_count", "validate_profile"]
