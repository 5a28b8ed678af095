from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np


@dataclass
class MeshAnalysis:
    n_vertices: int
    n_faces: int
    degenerate_faces: int
    boundary_edges: int
    nonmanifold_edges: int
    invalid_vertices: int
    components: int

    @property
    def is_manifold(self) -> bool:
        return self.nonmanifold_edges == 0

    @property
    def is_watertight(self) -> bool:
        return self.boundary_edges == 0 and self.is_manifold

    @property
    def has_degenerate_faces(self) -> bool:
        return self.degenerate_faces > 0

    @property
    def has_invalid_vertices(self) -> bool:
        return self.invalid_vertices > 0

    def issues(self) -> list[str]:
        issues: list[str] = []
        if self.has_invalid_vertices:
            issues.append(f"{self.invalid_vertices} invalid vertices (NaN/inf)")
        if self.has_degenerate_faces:
            issues.append(f"{self.degenerate_faces} degenerate faces")
        if self.boundary_edges > 0:
            issues.append(f"{self.boundary_edges} boundary edges (not watertight)")
        if self.nonmanifold_edges > 0:
            issues.append(f"{self.nonmanifold_edges} non-manifold edges")
        if self.components > 1:
            issues.append(f"{self.components} disconnected components")
        return issues


@dataclass
class Mesh:
    """Indexed triangle mesh: (n, 3) float vertices and (k, 3) int faces."""

    vertices: np.ndarray
    faces: np.ndarray
    metadata: dict[str, object] = field(default_factory=dict)
    analysis: MeshAnalysis | None = None

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3).copy()
        self.faces = np.asarray(self.faces, dtype=int).reshape(-1, 3).copy()

    def copy(self) -> "Mesh":
        return Mesh(
            vertices=self.vertices.copy(),
            faces=self.faces.copy(),
            metadata=dict(self.metadata),
            analysis=self.analysis,
        )

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        if self.n_vertices == 0:
            return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        mins = self.vertices.min(axis=0)
        maxs = self.vertices.max(axis=0)
        return (float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]), float(mins[2]), float(maxs[2]))

    def _face_cross(self) -> np.ndarray:
        if self.n_faces == 0:
            return np.zeros((0, 3), dtype=float)
        v0 = self.vertices[self.faces[:, 0]]
        v1 = self.vertices[self.faces[:, 1]]
        v2 = self.vertices[self.faces[:, 2]]
        return np.cross(v1 - v0, v2 - v0)

    def face_normals(self) -> np.ndarray:
        """Unit normals following the face winding; zero for degenerate faces."""
        normals = self._face_cross()
        lengths = np.linalg.norm(normals, axis=1)
        out = np.zeros_like(normals)
        mask = lengths > 0
        out[mask] = normals[mask] / lengths[mask, np.newaxis]
        return out

    @property
    def surface_area(self) -> float:
        return float(0.5 * np.linalg.norm(self._face_cross(), axis=1).sum())

    @property
    def signed_volume(self) -> float:
        """Divergence-theorem volume; positive when faces wind outward."""
        if self.n_faces == 0:
            return 0.0
        v0 = self.vertices[self.faces[:, 0]]
        v1 = self.vertices[self.faces[:, 1]]
        v2 = self.vertices[self.faces[:, 2]]
        return float(np.einsum("ij,ij->i", v0, np.cross(v1, v2)).sum() / 6.0)

    def translate(self, offset: Sequence[float], inplace: bool = True) -> "Mesh":
        vec = np.asarray(offset, dtype=float).reshape(3)
        if inplace:
            self.vertices = self.vertices + vec
            return self
        mesh = self.copy()
        mesh.vertices = mesh.vertices + vec
        return mesh


def combine_meshes(meshes: Iterable[Mesh]) -> Mesh:
    """Concatenate meshes into one vertex/face buffer (no boolean merge)."""

    meshes_list = list(meshes)
    if not meshes_list:
        raise ValueError("combine_meshes requires at least one mesh.")

    vertices = []
    faces = []
    offset = 0
    for mesh in meshes_list:
        vertices.append(mesh.vertices)
        faces.append(mesh.faces + offset)
        offset += mesh.n_vertices

    return Mesh(vertices=np.vstack(vertices), faces=np.vstack(faces), metadata=dict(meshes_list[0].metadata))


def arrange_grid(mesh: Mesh, spacing: float, count: int = 3) -> Mesh:
    """Lay out ``count x count`` translated copies centred on the origin."""

    if count < 1:
        raise ValueError("count must be >= 1.")
    half = (count - 1) / 2.0
    copies = []
    for ix in range(count):
        for iy in range(count):
            offset = ((ix - half) * spacing, (iy - half) * spacing, 0.0)
            copies.append(mesh.translate(offset, inplace=False))
    return combine_meshes(copies)


def _count_components(mesh: Mesh) -> int:
    if mesh.n_faces == 0:
        return 0
    regions = mesh_to_pyvista(mesh).connectivity()
    return int(np.unique(regions.cell_data["RegionId"]).size)


def analyze_mesh(mesh: Mesh, area_epsilon: float = 1e-12) -> MeshAnalysis:
    verts = mesh.vertices
    faces = mesh.faces
    invalid_vertices = int(np.count_nonzero(~np.isfinite(verts)))

    degenerate_faces = 0
    boundary_edges = 0
    nonmanifold_edges = 0
    if faces.size > 0:
        areas = np.linalg.norm(mesh._face_cross(), axis=1) * 0.5
        degenerate_faces = int(np.count_nonzero(areas <= area_epsilon))

        edges = np.vstack([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
        edges.sort(axis=1)
        _, counts = np.unique(edges, axis=0, return_counts=True)
        boundary_edges = int(np.count_nonzero(counts == 1))
        nonmanifold_edges = int(np.count_nonzero(counts > 2))

    analysis = MeshAnalysis(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_faces,
        degenerate_faces=degenerate_faces,
        boundary_edges=boundary_edges,
        nonmanifold_edges=nonmanifold_edges,
        invalid_vertices=invalid_vertices,
        components=_count_components(mesh),
    )
    mesh.analysis = analysis
    return analysis


def mesh_to_pyvista(mesh: Mesh):
    import pyvista as pv

    if mesh.n_faces == 0:
        return pv.PolyData(mesh.vertices, deep=True)
    cells = np.column_stack([np.full(mesh.n_faces, 3, dtype=np.int64), mesh.faces.astype(np.int64)])
    return pv.PolyData(mesh.vertices, cells.ravel(), deep=True)
