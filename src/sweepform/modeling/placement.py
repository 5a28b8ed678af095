from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Sequence

import numpy as np


def _require_vec3(value: Sequence[float], label: str) -> np.ndarray:
    try:
        arr = np.asarray(value, dtype=float).reshape(3)
    except Exception as exc:
        raise ValueError(f"{label} must be a 3D vector.") from exc
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{label} must be finite.")
    return arr


@dataclass(frozen=True, eq=False)
class Placement:
    """Immutable affine transform stored as a 4x4 homogeneous matrix.

    Placements never mutate; combine them with :func:`compose` (or ``a @ b``),
    which applies the right-hand placement first.
    """

    matrix: np.ndarray

    def __post_init__(self) -> None:
        try:
            arr = np.array(self.matrix, dtype=float).reshape(4, 4)
        except Exception as exc:
            raise ValueError("Placement matrix must be 4x4.") from exc
        arr.setflags(write=False)
        object.__setattr__(self, "matrix", arr)

    @classmethod
    def identity(cls) -> "Placement":
        return cls(np.eye(4))

    @classmethod
    def from_translation(cls, offset: Sequence[float]) -> "Placement":
        mat = np.eye(4)
        mat[:3, 3] = _require_vec3(offset, "offset")
        return cls(mat)

    @classmethod
    def from_rotation_x(cls, angle: float) -> "Placement":
        """Rotation about +X by ``angle`` radians."""
        c, s = np.cos(angle), np.sin(angle)
        mat = np.eye(4)
        mat[1:3, 1:3] = [[c, -s], [s, c]]
        return cls(mat)

    @classmethod
    def from_rotation_y(cls, angle: float) -> "Placement":
        """Rotation about +Y by ``angle`` radians."""
        c, s = np.cos(angle), np.sin(angle)
        mat = np.eye(4)
        mat[0, 0], mat[0, 2] = c, s
        mat[2, 0], mat[2, 2] = -s, c
        return cls(mat)

    @classmethod
    def from_rotation_z(cls, angle: float) -> "Placement":
        """Rotation about +Z by ``angle`` radians."""
        c, s = np.cos(angle), np.sin(angle)
        mat = np.eye(4)
        mat[0:2, 0:2] = [[c, -s], [s, c]]
        return cls(mat)

    @classmethod
    def from_scaling(cls, factors: Sequence[float]) -> "Placement":
        mat = np.eye(4)
        mat[:3, :3] = np.diag(_require_vec3(factors, "factors"))
        return cls(mat)

    @classmethod
    def from_frame(
        cls,
        x_axis: Sequence[float],
        y_axis: Sequence[float],
        z_axis: Sequence[float],
        origin: Sequence[float] = (0.0, 0.0, 0.0),
    ) -> "Placement":
        """Map the local X/Y/Z axes onto the given world directions."""
        mat = np.eye(4)
        mat[:3, 0] = _require_vec3(x_axis, "x_axis")
        mat[:3, 1] = _require_vec3(y_axis, "y_axis")
        mat[:3, 2] = _require_vec3(z_axis, "z_axis")
        mat[:3, 3] = _require_vec3(origin, "origin")
        return cls(mat)

    @property
    def linear(self) -> np.ndarray:
        return self.matrix[:3, :3]

    @property
    def offset(self) -> np.ndarray:
        return self.matrix[:3, 3]

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.matrix)))

    def compose(self, other: "Placement") -> "Placement":
        return Placement(self.matrix @ other.matrix)

    def __matmul__(self, other: "Placement") -> "Placement":
        if not isinstance(other, Placement):
            return NotImplemented
        return self.compose(other)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Transform (n, 2) profile points (z = 0) or (n, 3) points."""
        pts = np.asarray(points, dtype=float)
        if pts.ndim == 1:
            pts = pts.reshape(1, -1)
        if pts.shape[1] == 2:
            pts = np.column_stack([pts, np.zeros(pts.shape[0])])
        elif pts.shape[1] != 3:
            raise ValueError("points must be (n, 2) or (n, 3).")
        return pts @ self.linear.T + self.offset

    def plane_normal(self) -> np.ndarray:
        """Image of the reference plane's +Z side, honouring mirroring."""
        lin = self.linear
        return np.cross(lin[:, 0], lin[:, 1])


def compose(*placements: Placement) -> Placement:
    """Compose left to right: ``compose(a, b, c)`` applies ``c`` first."""
    if not placements:
        return Placement.identity()
    return reduce(Placement.compose, placements)


__all__ = ["Placement", "compose"]
