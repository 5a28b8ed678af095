"""Transform families: progress in [0, 1] (or [0, 2]) to a slice placement.

Each family is an immutable, validated description of a sweep. The loft engine
only talks to :class:`TransformFamily`; it never inspects concrete families.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, ClassVar

import numpy as np

from sweepform.errors import ConfigurationError, DegenerateGeometryError
from sweepform.validation import require_count, require_finite, require_positive

from .placement import Placement, compose

TAU = 2.0 * np.pi

# Stands the XY profile up so its local Y follows world +Z and its normal
# lies along the sweep tangent.
_STAND_UP = Placement.from_rotation_x(np.pi / 2.0)


class Topology(enum.Enum):
    OPEN = "open"
    CLOSED_SINGLE = "closed_single"
    CLOSED_DOUBLE = "closed_double"

    @property
    def is_closed(self) -> bool:
        return self is not Topology.OPEN

    @property
    def traversals(self) -> int:
        return 2 if self is Topology.CLOSED_DOUBLE else 1


def topology_for_twists(half_twists: int) -> Topology:
    """Odd half-twist counts only close after two traversals."""
    if half_twists % 2:
        return Topology.CLOSED_DOUBLE
    return Topology.CLOSED_SINGLE


class TransformFamily(ABC):
    """Capability shared by every family: a placement per progress value."""

    name: ClassVar[str] = "custom"

    @property
    @abstractmethod
    def topology(self) -> Topology:
        ...

    @property
    def half_twists(self) -> int:
        return 0

    @abstractmethod
    def evaluate(self, progress: float) -> Placement:
        ...


@dataclass(frozen=True)
class FunctionFamily(TransformFamily):
    """Wrap a plain ``progress -> Placement`` callable with declared topology.

    A closed topology must agree with the half-twist parity: odd counts are
    ``CLOSED_DOUBLE``, even counts ``CLOSED_SINGLE``.
    """

    func: Callable[[float], Placement]
    declared_topology: Topology = Topology.OPEN
    half_twists: int = 0

    def __post_init__(self) -> None:
        if not callable(self.func):
            raise ConfigurationError("func must be callable.")
        if not isinstance(self.declared_topology, Topology):
            raise ConfigurationError("declared_topology must be a Topology.")
        object.__setattr__(self, "half_twists", require_count("half_twists", self.half_twists, 0))
        if self.declared_topology.is_closed:
            expected = topology_for_twists(self.half_twists)
            if self.declared_topology is not expected:
                raise ConfigurationError(
                    f"{self.half_twists} half-twists close as {expected.value}, "
                    f"not {self.declared_topology.value}."
                )

    @property
    def topology(self) -> Topology:
        return self.declared_topology

    def evaluate(self, progress: float) -> Placement:
        return self.func(progress)


@dataclass(frozen=True)
class TwistColumn(TransformFamily):
    """Straight vertical sweep that twists, tapers and optionally sways."""

    name: ClassVar[str] = "twist-column"

    height: float = 100.0
    twist_degrees: float = 180.0
    top_scale: float = 0.3
    wave_amplitude: float = 0.0
    wave_frequency: float = 2.0

    def __post_init__(self) -> None:
        require_positive("height", self.height)
        require_finite("twist_degrees", self.twist_degrees)
        require_finite("wave_amplitude", self.wave_amplitude)
        if require_finite("wave_frequency", self.wave_frequency) < 0:
            raise ConfigurationError("wave_frequency must be >= 0.")
        if require_finite("top_scale", self.top_scale) <= 0:
            raise DegenerateGeometryError("top_scale", "top_scale must be > 0 or the top slice collapses to a point.")

    @property
    def topology(self) -> Topology:
        return Topology.OPEN

    def evaluate(self, progress: float) -> Placement:
        angle = progress * np.deg2rad(self.twist_degrees)
        factor = 1.0 - progress * (1.0 - self.top_scale)
        z = progress * self.height
        wave = self.wave_amplitude * np.sin(progress * self.wave_frequency * TAU)
        return compose(
            Placement.from_translation((wave, 0.0, z)),
            Placement.from_rotation_z(angle),
            Placement.from_scaling((factor, factor, 1.0)),
        )


def _check_strip_clearance(radius: float, width: float) -> None:
    # The strip spans -w/4 .. 3w/4 around the core circle once twisted inward.
    if radius <= 0.75 * width:
        raise DegenerateGeometryError(
            "width",
            f"width {width:g} is too large for radius {radius:g}; the strip would cross the sweep axis.",
        )


@dataclass(frozen=True)
class Mobius(TransformFamily):
    """Band around a circle of ``radius`` with ``twists`` half-twists.

    The profile is stood up into the radial/vertical plane and rotated in that
    plane by ``twists * t / 2`` while its centre rides a ``width / 4`` offset
    circle turning at the same rate.
    """

    name: ClassVar[str] = "mobius"

    radius: float = 40.0
    width: float = 15.0
    twists: int = 1

    def __post_init__(self) -> None:
        require_positive("radius", self.radius)
        require_positive("width", self.width)
        object.__setattr__(self, "twists", require_count("twists", self.twists, 1))
        _check_strip_clearance(self.radius, self.width)

    @property
    def half_twists(self) -> int:
        return self.twists

    @property
    def topology(self) -> Topology:
        return topology_for_twists(self.twists)

    def evaluate(self, progress: float) -> Placement:
        t = progress * TAU
        tilt = self.twists * t / 2.0
        offset = self.width / 4.0
        ring = self.radius + offset * np.cos(tilt)
        center = (ring * np.cos(t), ring * np.sin(t), offset * np.sin(tilt))
        return compose(
            Placement.from_translation(center),
            Placement.from_rotation_z(t),
            _STAND_UP,
            Placement.from_rotation_z(tilt),
        )


@dataclass(frozen=True)
class DoubleMobius(TransformFamily):
    name: ClassVar[str] = "double-mobius"

    radius: float = 40.0
    width: float = 15.0

    def __post_init__(self) -> None:
        require_positive("radius", self.radius)
        require_positive("width", self.width)
        _check_strip_clearance(self.radius, self.width)

    @property
    def half_twists(self) -> int:
        return 2

    @property
    def topology(self) -> Topology:
        return topology_for_twists(self.half_twists)

    def evaluate(self, progress: float) -> Placement:
        t = progress * TAU
        offset = self.width / 4.0
        ring = self.radius + offset * np.cos(t)
        center = (ring * np.cos(t), ring * np.sin(t), offset * np.sin(2.0 * t))
        return compose(
            Placement.from_translation(center),
            Placement.from_rotation_z(t),
            _STAND_UP,
            Placement.from_rotation_z(t),
        )


class _KnotFamily(TransformFamily):
    """Tube along a closed knot curve using its analytic Frenet frame.

    Subclasses return the curve and its first two derivatives at ``t``; the
    curve is scaled by ``radius / 3`` and the section rolled by
    ``winding * t`` about the tangent.
    """

    winding: ClassVar[float] = 1.0
    radius: float

    def _validate(self) -> None:
        require_positive("radius", self.radius)

    @property
    def topology(self) -> Topology:
        return Topology.CLOSED_SINGLE

    @abstractmethod
    def _curve(self, t: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        ...

    def evaluate(self, progress: float) -> Placement:
        t = progress * TAU
        point, velocity, accel = self._curve(t)
        tangent = velocity / np.linalg.norm(velocity)
        binormal = np.cross(velocity, accel)
        norm = np.linalg.norm(binormal)
        if norm < 1e-12:
            raise DegenerateGeometryError("progress", f"{self.name} curve has no curvature at progress {progress:g}.")
        binormal = binormal / norm
        normal = np.cross(binormal, tangent)
        frame = Placement.from_frame(normal, binormal, tangent, origin=point * (self.radius / 3.0))
        return compose(frame, Placement.from_rotation_z(self.winding * t))


@dataclass(frozen=True)
class TrefoilKnot(_KnotFamily):
    """(2, 3) torus knot."""

    name: ClassVar[str] = "trefoil"
    winding: ClassVar[float] = 3.0

    radius: float = 40.0

    def __post_init__(self) -> None:
        self._validate()

    def _curve(self, t: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        s1, c1 = np.sin(t), np.cos(t)
        s2, c2 = np.sin(2 * t), np.cos(2 * t)
        s3, c3 = np.sin(3 * t), np.cos(3 * t)
        point = np.array([s1 + 2 * s2, c1 - 2 * c2, -s3])
        velocity = np.array([c1 + 4 * c2, -s1 + 4 * s2, -3 * c3])
        accel = np.array([-s1 - 8 * s2, -c1 + 8 * c2, 9 * s3])
        return point, velocity, accel


@dataclass(frozen=True)
class FigureEightKnot(_KnotFamily):
    """Four-crossing (4_1) knot."""

    name: ClassVar[str] = "figure8"
    winding: ClassVar[float] = 2.0

    radius: float = 40.0

    def __post_init__(self) -> None:
        self._validate()

    def _curve(self, t: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        r = 2 + np.cos(2 * t)
        dr = -2 * np.sin(2 * t)
        ddr = -4 * np.cos(2 * t)
        s3, c3 = np.sin(3 * t), np.cos(3 * t)
        point = np.array([r * c3, r * s3, np.sin(4 * t)])
        velocity = np.array([dr * c3 - 3 * r * s3, dr * s3 + 3 * r * c3, 4 * np.cos(4 * t)])
        accel = np.array(
            [
                ddr * c3 - 6 * dr * s3 - 9 * r * c3,
                ddr * s3 + 6 * dr * c3 - 9 * r * s3,
                -16 * np.sin(4 * t),
            ]
        )
        return point, velocity, accel


@dataclass(frozen=True)
class WaveTile(TransformFamily):
    """Flat profile rising in Z while swaying sinusoidally along X."""

    name: ClassVar[str] = "wave"

    height: float = 20.0
    amplitude: float = 4.0
    cycles: float = 2.0

    def __post_init__(self) -> None:
        require_positive("height", self.height)
        require_finite("amplitude", self.amplitude)
        if require_finite("cycles", self.cycles) < 0:
            raise ConfigurationError("cycles must be >= 0.")

    @property
    def topology(self) -> Topology:
        return Topology.OPEN

    def evaluate(self, progress: float) -> Placement:
        sway = self.amplitude * np.sin(TAU * self.cycles * progress)
        return Placement.from_translation((sway, 0.0, progress * self.height))


@dataclass(frozen=True)
class SaddleTile(TransformFamily):
    """Flat profile rising in Z, stretched along X and squeezed along Y."""

    name: ClassVar[str] = "saddle"

    height: float = 20.0
    warp: float = 0.3

    def __post_init__(self) -> None:
        require_positive("height", self.height)
        if abs(require_finite("warp", self.warp)) >= 1.0:
            raise DegenerateGeometryError("warp", "|warp| must be < 1 or an end slice collapses to a line.")

    @property
    def topology(self) -> Topology:
        return Topology.OPEN

    def evaluate(self, progress: float) -> Placement:
        u = 2.0 * progress - 1.0
        return compose(
            Placement.from_translation((0.0, 0.0, progress * self.height)),
            Placement.from_scaling((1.0 + self.warp * u, 1.0 - self.warp * u, 1.0)),
        )


FAMILIES: dict[str, type[TransformFamily]] = {
    cls.name: cls
    for cls in (TwistColumn, Mobius, DoubleMobius, TrefoilKnot, FigureEightKnot, WaveTile, SaddleTile)
}


def make_family(name: str, **params: float) -> TransformFamily:
    """Instantiate a registered family by its shape name."""

    key = str(name).strip().lower()
    family_cls = FAMILIES.get(key)
    if family_cls is None:
        raise ConfigurationError(f"Unknown family {name!r}; expected one of {sorted(FAMILIES)}.")
    try:
        return family_cls(**params)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid parameters for {key}: {exc}") from exc


__all__ = [
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
    "topology_for_twists",
]
