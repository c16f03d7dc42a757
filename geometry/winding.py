"""Local injectivity test for 2D triangle meshes via vertex angle sums.

The signed corner angles around an interior vertex of a locally injective
mesh add up to exactly one full turn. A sum that rounds to any other number
of turns means the one-ring folds over itself (zero turns) or wraps more than
once; such vertices are called winded.
"""

from __future__ import annotations

from typing import List

import numpy as np

from geometry.angles import TWO_PI, vector_vector_angles
from geometry.boundary import boundary_vertex_mask
from geometry.cell_rows import cell_rows, vertex_rows


def vertex_angle_sums(vertices, faces) -> np.ndarray:
    """Total signed corner angle at every vertex, shape ``(n_vertices,)``."""
    V = vertex_rows(vertices, (2,))
    F = cell_rows(faces, 3, "faces")
    angle_sums = np.zeros(len(V), dtype=float)
    if len(F) == 0:
        return angle_sums

    p1 = V[F[:, 0]]
    p2 = V[F[:, 1]]
    p3 = V[F[:, 2]]
    np.add.at(angle_sums, F[:, 0], vector_vector_angles(p2 - p1, p3 - p1))
    np.add.at(angle_sums, F[:, 1], vector_vector_angles(p3 - p2, p1 - p2))
    np.add.at(angle_sums, F[:, 2], vector_vector_angles(p1 - p3, p2 - p3))
    return angle_sums


def _round_half_away(values: np.ndarray) -> np.ndarray:
    # np.round rounds exact ties to even; turn counts send them away from zero.
    truncated = np.trunc(values)
    ties = np.abs(values - truncated) == 0.5
    return np.where(ties, truncated + np.sign(values), np.round(values))


def compute_winded_interior_vertices(
    vertices, faces, is_boundary_vertex=None
) -> List[int]:
    """Return the sorted interior vertices whose angle sum is not one turn.

    Parameters
    ----------
    vertices : array_like
        ``(n, 2)`` vertex positions.
    faces : array_like
        ``(n_faces, 3)`` consistently oriented triangles.
    is_boundary_vertex : array_like of bool, optional
        Boundary flag per vertex. Derived from ``faces`` when omitted.
        Boundary vertices are never reported.
    """
    V = vertex_rows(vertices, (2,))
    if is_boundary_vertex is None:
        is_boundary_vertex = boundary_vertex_mask(len(V), faces)
    else:
        is_boundary_vertex = np.asarray(is_boundary_vertex, dtype=bool)

    turns = _round_half_away(vertex_angle_sums(V, faces) / TWO_PI)
    winded = np.flatnonzero(~is_boundary_vertex & (turns != 1))
    return [int(vid) for vid in winded]


__all__ = ["vertex_angle_sums", "compute_winded_interior_vertices"]
