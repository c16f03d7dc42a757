"""Signed and unsigned area/volume measures with analytic gradients.

Triangle meshes are 2D: ``vertices`` is ``(n, 2)`` and ``faces`` is
``(n_faces, 3)``. Tetrahedral meshes are 3D: ``vertices`` is ``(n, 3)`` and
``tets`` is ``(n_tets, 4)``. A tetrahedron ``(p1, p2, p3, p4)`` has positive
volume when ``((p2 - p1) x (p3 - p1)) . (p4 - p1) > 0``.

Functions whose name ends in ``_with_gradient`` return the scalar measure and
*add* its gradient into the caller's ``grad`` buffer (same shape as
``vertices``). The buffer is never cleared here, so several terms can be
accumulated into one buffer in a row.
"""

from __future__ import annotations

import math

import numpy as np

from geometry.cell_rows import cell_rows, vertex_rows


def _fast_cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Compute cross products for arrays of 3D vectors."""
    x = a[..., 1] * b[..., 2] - a[..., 2] * b[..., 1]
    y = a[..., 2] * b[..., 0] - a[..., 0] * b[..., 2]
    z = a[..., 0] * b[..., 1] - a[..., 1] * b[..., 0]
    out = np.empty(x.shape + (3,), dtype=x.dtype)
    out[..., 0] = x
    out[..., 1] = y
    out[..., 2] = z
    return out


def _tri_area_expansion(p1, p2, p3):
    return 0.5 * (
        p3[..., 0] * (p1[..., 1] - p2[..., 1])
        + p1[..., 0] * (p2[..., 1] - p3[..., 1])
        + p2[..., 0] * (p3[..., 1] - p1[..., 1])
    )


def _tet_volume_expansion(p1, p2, p3, p4):
    x1, y1, z1 = p1[..., 0], p1[..., 1], p1[..., 2]
    x2, y2, z2 = p2[..., 0], p2[..., 1], p2[..., 2]
    x3, y3, z3 = p3[..., 0], p3[..., 1], p3[..., 2]
    x4, y4, z4 = p4[..., 0], p4[..., 1], p4[..., 2]
    return (
        x4 * (y3 * (z1 - z2) + y2 * (z3 - z1) + y1 * (z2 - z3))
        + x3 * (y4 * (z2 - z1) + y1 * (z4 - z2) + y2 * (z1 - z4))
        + x1 * (y4 * (z3 - z2) + y2 * (z4 - z3) + y3 * (z2 - z4))
        + x2 * (y4 * (z1 - z3) + y3 * (z4 - z1) + y1 * (z3 - z4))
    ) / 6


def _tet_volumes_and_gradients(p1, p2, p3, p4) -> tuple[np.ndarray, np.ndarray]:
    """Volumes ``(n,)`` and per-corner gradients ``(n, 4, 3)`` of a batch of tets."""
    e12 = p2 - p1
    e13 = p3 - p1
    e14 = p4 - p1
    e23 = p3 - p2
    e24 = p4 - p2
    grad = np.stack(
        (
            _fast_cross(e24, e23),
            _fast_cross(e13, e14),
            _fast_cross(e14, e12),
            _fast_cross(e12, e13),
        ),
        axis=-2,
    )
    grad /= 6
    volume = np.einsum("...i,...i->...", _fast_cross(e12, e13), e14) / 6
    return volume, grad


# ---------------------------------------------------------------------------
# Single elements
# ---------------------------------------------------------------------------


def tri_signed_area(p1, p2, p3) -> float:
    """Signed area of a 2D triangle; positive for counter-clockwise corners."""
    return float(
        _tri_area_expansion(
            np.asarray(p1, dtype=float),
            np.asarray(p2, dtype=float),
            np.asarray(p3, dtype=float),
        )
    )


def tet_signed_volume(p1, p2, p3, p4) -> float:
    """Signed volume of the tetrahedron ``(p1, p2, p3, p4)``."""
    return float(
        _tet_volume_expansion(
            np.asarray(p1, dtype=float),
            np.asarray(p2, dtype=float),
            np.asarray(p3, dtype=float),
            np.asarray(p4, dtype=float),
        )
    )


def tet_signed_volume_with_gradient(p1, p2, p3, p4) -> tuple[float, np.ndarray]:
    """Signed volume and its ``(4, 3)`` gradient, one row per corner.

    Each row is the cross product of the two edges of the opposite face,
    divided by 6.
    """
    volume, grad = _tet_volumes_and_gradients(
        np.asarray(p1, dtype=float),
        np.asarray(p2, dtype=float),
        np.asarray(p3, dtype=float),
        np.asarray(p4, dtype=float),
    )
    return float(volume), grad


def heron_tri_area(d1: float, d2: float, d3: float) -> float:
    """Triangle area from its three squared edge lengths (any order).

    Uses the cancellation-safe arrangement of Heron's formula on the lengths
    sorted as ``a >= b >= c``. Noise that makes the product slightly negative
    for degenerate triangles is clipped by ``abs``.
    """
    a, b, c = (math.sqrt(d) for d in sorted((d1, d2, d3), reverse=True))
    return 0.25 * math.sqrt(
        abs((a + (b + c)) * (c - (a - b)) * (c + (a - b)) * (a + (b - c)))
    )


def heron_tri_areas(squared_lengths: np.ndarray) -> np.ndarray:
    """Vectorized :func:`heron_tri_area` over an ``(n, 3)`` array."""
    lengths = np.sqrt(np.sort(np.asarray(squared_lengths, dtype=float), axis=1))
    c, b, a = lengths[:, 0], lengths[:, 1], lengths[:, 2]
    return 0.25 * np.sqrt(
        np.abs((a + (b + c)) * (c - (a - b)) * (c + (a - b)) * (a + (b - c)))
    )


def tri_aspect_ratio(d1: float, d2: float, d3: float) -> float:
    """Aspect ratio ``abc / (8 (s-a)(s-b)(s-c))`` from squared edge lengths.

    Equals 1 for an equilateral triangle and ``inf`` for a degenerate one.
    """
    a = math.sqrt(d1)
    b = math.sqrt(d2)
    c = math.sqrt(d3)
    s = (a + b + c) / 2
    if s - a == 0 or s - b == 0 or s - c == 0:
        return math.inf
    return (a / (s - a)) * (b / (s - b)) * (c / (s - c)) / 8


# ---------------------------------------------------------------------------
# Whole meshes
# ---------------------------------------------------------------------------


def squared_edge_lengths(vertices, faces) -> np.ndarray:
    """Squared edge lengths ``(n_faces, 3)``; column ``k`` is opposite corner ``k``."""
    V = vertex_rows(vertices)
    F = cell_rows(faces, 3, "faces")
    v1 = V[F[:, 0]]
    v2 = V[F[:, 1]]
    v3 = V[F[:, 2]]
    D = np.empty((len(F), 3), dtype=float)
    D[:, 0] = np.sum((v2 - v3) ** 2, axis=1)
    D[:, 1] = np.sum((v3 - v1) ** 2, axis=1)
    D[:, 2] = np.sum((v1 - v2) ** 2, axis=1)
    return D


def signed_tri_areas(vertices, faces) -> np.ndarray:
    """Signed area of every triangle of a 2D mesh."""
    V = vertex_rows(vertices, (2,))
    F = cell_rows(faces, 3, "faces")
    return _tri_area_expansion(V[F[:, 0]], V[F[:, 1]], V[F[:, 2]])


def signed_tet_volumes(vertices, tets) -> np.ndarray:
    """Signed volume of every tetrahedron of a 3D mesh."""
    V = vertex_rows(vertices, (3,))
    T = cell_rows(tets, 4, "tets")
    return _tet_volume_expansion(V[T[:, 0]], V[T[:, 1]], V[T[:, 2]], V[T[:, 3]])


def min_signed_mesh_area(vertices, faces) -> float:
    """Smallest signed triangle area; negative means some triangle is flipped.

    Returns ``inf`` for a mesh without triangles.
    """
    areas = signed_tri_areas(vertices, faces)
    return float(np.min(areas)) if areas.size else math.inf


def min_signed_mesh_volume(vertices, tets) -> float:
    """Smallest signed tet volume; ``inf`` for a mesh without tets."""
    volumes = signed_tet_volumes(vertices, tets)
    return float(np.min(volumes)) if volumes.size else math.inf


def total_signed_mesh_area(vertices, faces) -> float:
    return float(np.sum(signed_tri_areas(vertices, faces)))


def total_signed_mesh_volume(vertices, tets) -> float:
    return float(np.sum(signed_tet_volumes(vertices, tets)))


def total_unsigned_area(vertices, faces) -> float:
    """Sum of triangle areas by Heron's formula; works for 2D and 3D vertices."""
    return float(np.sum(heron_tri_areas(squared_edge_lengths(vertices, faces))))


def total_unsigned_volume(vertices, tets) -> float:
    """Sum of absolute tet volumes."""
    return float(np.sum(np.abs(signed_tet_volumes(vertices, tets))))


def total_signed_area(vertices, edges) -> float:
    """Shoelace area enclosed by a list of directed edges ``(i, j)``."""
    V = vertex_rows(vertices, (2,))
    E = cell_rows(edges, 2, "edges")
    pi = V[E[:, 0]]
    pj = V[E[:, 1]]
    return float(np.sum(pi[:, 0] * pj[:, 1] - pi[:, 1] * pj[:, 0])) / 2


def total_signed_area_with_gradient(vertices, edges, grad: np.ndarray) -> float:
    """Shoelace area of ``edges``; adds ``dA/dV`` into ``grad`` ``(n, 2)``.

    Edge ``(i, j)`` contributes ``0.5 * (y_j, -x_j)`` to vertex ``i`` and
    ``0.5 * (-y_i, x_i)`` to vertex ``j``.
    """
    V = vertex_rows(vertices, (2,))
    E = cell_rows(edges, 2, "edges")
    pi = V[E[:, 0]]
    pj = V[E[:, 1]]
    area = float(np.sum(pi[:, 0] * pj[:, 1] - pi[:, 1] * pj[:, 0])) / 2
    np.add.at(grad, E[:, 0], 0.5 * np.column_stack((pj[:, 1], -pj[:, 0])))
    np.add.at(grad, E[:, 1], 0.5 * np.column_stack((-pi[:, 1], pi[:, 0])))
    return area


def _origin_rows(origin, n: int) -> np.ndarray:
    if origin is None:
        return np.zeros((n, 3), dtype=float)
    return np.broadcast_to(np.asarray(origin, dtype=float), (n, 3))


def total_signed_volume(vertices, triangles, origin=None) -> float:
    """Volume enclosed by oriented triangles, as a sum of cones to ``origin``.

    For a closed, consistently oriented surface the result does not depend on
    ``origin`` (default: the coordinate origin).
    """
    V = vertex_rows(vertices, (3,))
    T = cell_rows(triangles, 3, "triangles")
    o = _origin_rows(origin, len(T))
    return float(np.sum(_tet_volume_expansion(V[T[:, 0]], V[T[:, 1]], V[T[:, 2]], o)))


def total_signed_volume_with_gradient(
    vertices, triangles, grad: np.ndarray, origin=None
) -> float:
    """:func:`total_signed_volume`; adds ``dVol/dV`` into ``grad`` ``(n, 3)``."""
    V = vertex_rows(vertices, (3,))
    T = cell_rows(triangles, 3, "triangles")
    o = _origin_rows(origin, len(T))
    volumes, tet_grad = _tet_volumes_and_gradients(
        V[T[:, 0]], V[T[:, 1]], V[T[:, 2]], o
    )
    for corner in range(3):
        np.add.at(grad, T[:, corner], tet_grad[:, corner])
    return float(np.sum(volumes))


def triangle_half_edges(faces) -> np.ndarray:
    """All directed edges ``(v1, v2), (v2, v3), (v3, v1)`` of every triangle."""
    F = cell_rows(faces, 3, "faces")
    return np.concatenate((F[:, [0, 1]], F[:, [1, 2]], F[:, [2, 0]]))


def total_signed_mesh_area_with_gradient(vertices, faces, grad: np.ndarray) -> float:
    """Total signed triangle area; adds its gradient into ``grad`` ``(n, 2)``.

    Per triangle the three shoelace terms give half the rotated opposite edge
    at every corner.
    """
    return total_signed_area_with_gradient(vertices, triangle_half_edges(faces), grad)


def total_signed_mesh_volume_with_gradient(vertices, tets, grad: np.ndarray) -> float:
    """Total signed tet volume; adds its gradient into ``grad`` ``(n, 3)``."""
    V = vertex_rows(vertices, (3,))
    T = cell_rows(tets, 4, "tets")
    volumes, tet_grad = _tet_volumes_and_gradients(
        V[T[:, 0]], V[T[:, 1]], V[T[:, 2]], V[T[:, 3]]
    )
    for corner in range(4):
        np.add.at(grad, T[:, corner], tet_grad[:, corner])
    return float(np.sum(volumes))


__all__ = [
    "tri_signed_area",
    "tet_signed_volume",
    "tet_signed_volume_with_gradient",
    "heron_tri_area",
    "heron_tri_areas",
    "tri_aspect_ratio",
    "squared_edge_lengths",
    "signed_tri_areas",
    "signed_tet_volumes",
    "min_signed_mesh_area",
    "min_signed_mesh_volume",
    "total_signed_mesh_area",
    "total_signed_mesh_volume",
    "total_unsigned_area",
    "total_unsigned_volume",
    "total_signed_area",
    "total_signed_area_with_gradient",
    "total_signed_volume",
    "total_signed_volume_with_gradient",
    "triangle_half_edges",
    "total_signed_mesh_area_with_gradient",
    "total_signed_mesh_volume_with_gradient",
]
