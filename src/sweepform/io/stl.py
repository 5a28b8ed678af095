from __future__ import annotations

from pathlib import Path

import numpy as np

from sweepform._config import get_unit_settings
from sweepform.mesh import Mesh

_HEADER = "sweepform STL mm, model units {}"

_FACET = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("vertices", "<f4", (3, 3)),
        ("attributes", "<u2"),
    ]
)


def write_stl(mesh: Mesh, path: Path | str, ascii: bool = False, scale_to_mm: float | None = None) -> Path:
    """Write ``mesh`` as binary (default) or ASCII STL and return the path.

    STL carries no units, so coordinates are written in millimeters. Model
    units come from ``sweepform.cfg`` unless ``scale_to_mm`` is given.
    """

    path = Path(path)
    if scale_to_mm is None:
        units = get_unit_settings()
        scale_to_mm, label = units.scale_to_mm, units.label
    else:
        label = f"x{scale_to_mm:g}"
    normals = mesh.face_normals()
    triangles = mesh.vertices[mesh.faces] * scale_to_mm if mesh.n_faces else np.zeros((0, 3, 3))

    if ascii:
        lines = ["solid sweepform"]
        for normal, tri in zip(normals, triangles):
            lines.append("  facet normal {:.6e} {:.6e} {:.6e}".format(*normal))
            lines.append("    outer loop")
            for vertex in tri:
                lines.append("      vertex {:.6e} {:.6e} {:.6e}".format(*vertex))
            lines.append("    endloop")
            lines.append("  endfacet")
        lines.append("endsolid sweepform")
        path.write_text("\n".join(lines) + "\n")
        return path

    records = np.zeros(mesh.n_faces, dtype=_FACET)
    records["normal"] = normals
    records["vertices"] = triangles
    with path.open("wb") as handle:
        handle.write(_HEADER.format(label).encode("ascii")[:80].ljust(80, b"\0"))
        handle.write(np.array(mesh.n_faces, dtype="<u4").tobytes())
        handle.write(records.tobytes())
    return path
