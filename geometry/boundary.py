"""Boundary extraction for triangle and tetrahedral meshes.

Boundaries are found by half-edge / half-face matching: every element
contributes its oriented sides, and a side is on the boundary when no
neighbouring element contributes the same side with opposite orientation.

Meshes are assumed to be manifold and consistently oriented. This is not
checked; on other inputs the result is unspecified.
"""

from __future__ import annotations

from typing import List, Set, Tuple

import numpy as np

from geometry.cell_rows import cell_rows

Edge = Tuple[int, int]
Triangle = Tuple[int, int, int]


def extract_mesh_boundary_edges(faces) -> List[Edge]:
    """Return the directed boundary edges of a triangle mesh, sorted."""
    F = cell_rows(faces, 3, "faces")

    half_edges: Set[Edge] = set()
    for v1, v2, v3 in F.tolist():
        half_edges.add((v1, v2))
        half_edges.add((v2, v3))
        half_edges.add((v3, v1))

    return sorted(he for he in half_edges if (he[1], he[0]) not in half_edges)


def extract_mesh_boundary_vertices(faces) -> List[int]:
    """Return the sorted vertex indices lying on boundary edges."""
    boundary_vertices: Set[int] = set()
    for tail, head in extract_mesh_boundary_edges(faces):
        boundary_vertices.add(tail)
        boundary_vertices.add(head)
    return sorted(boundary_vertices)


def boundary_vertex_mask(n_vertices: int, faces) -> np.ndarray:
    """Boolean mask of length ``n_vertices`` flagging boundary vertices."""
    mask = np.zeros(n_vertices, dtype=bool)
    boundary = extract_mesh_boundary_vertices(faces)
    if boundary:
        mask[boundary] = True
    return mask


def _rotate_to_min_vertex(tri: Triangle) -> Triangle:
    """Rotate a triangle so its smallest index comes first; orientation is kept."""
    start = tri.index(min(tri))
    return tri[start:] + tri[:start]


def _tet_half_faces(v1: int, v2: int, v3: int, v4: int) -> Tuple[Triangle, ...]:
    # Two tets sharing a face produce that face with opposite orientations.
    return (
        (v4, v3, v2),
        (v1, v3, v4),
        (v1, v4, v2),
        (v1, v2, v3),
    )


def extract_mesh_boundary_triangles(tets) -> List[Triangle]:
    """Return the boundary half-faces of a tet mesh, sorted.

    Each triangle is rotated so its smallest vertex index comes first; the
    orientation is the one it has in its tetrahedron.
    """
    T = cell_rows(tets, 4, "tets")

    half_faces: Set[Triangle] = set()
    for v1, v2, v3, v4 in T.tolist():
        for hf in _tet_half_faces(v1, v2, v3, v4):
            half_faces.add(_rotate_to_min_vertex(hf))

    # With the smallest index first, (a, b, c) is opposed by (a, c, b).
    return sorted(hf for hf in half_faces if (hf[0], hf[2], hf[1]) not in half_faces)


def extract_tet_mesh_boundary_vertices(tets) -> List[int]:
    """Return the sorted vertex indices lying on boundary triangles."""
    boundary_vertices: Set[int] = set()
    for tri in extract_mesh_boundary_triangles(tets):
        boundary_vertices.update(tri)
    return sorted(boundary_vertices)


__all__ = [
    "extract_mesh_boundary_edges",
    "extract_mesh_boundary_vertices",
    "boundary_vertex_mask",
    "extract_mesh_boundary_triangles",
    "extract_tet_mesh_boundary_vertices",
]
