from __future__ import annotations

import numpy as np

from .profile import Profile


def _triangle_areas(points: np.ndarray, faces: np.ndarray) -> np.ndarray:
    a = points[faces[:, 0]]
    b = points[faces[:, 1]]
    c = points[faces[:, 2]]
    return 0.5 * ((b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0]))


def triangulate_profile(profile: Profile) -> np.ndarray:
    """Ear-clip a ring profile; triangles follow the profile's own winding."""

    try:
        import mapbox_earcut as earcut
    except ImportError as exc:  # pragma: no cover - runtime dependency
        raise ImportError("mapbox_earcut is required for cap triangulation.") from exc

    # earcut rejects read-only buffers; profile points are frozen.
    points = np.array(profile.points, dtype=np.float64)
    ring_end_indices = np.asarray([points.shape[0]], dtype=np.uint32)
    indices = earcut.triangulate_float64(points, ring_end_indices)
    faces = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    if faces.size == 0:
        return faces

    wanted = 1.0 if profile.signed_area >= 0 else -1.0
    flip = _triangle_areas(points, faces) * wanted < 0
    faces[flip] = faces[flip][:, [0, 2, 1]]
    return faces


__all__ = ["triangulate_profile"]
