"""Local injectivity checks on flat state vectors.

The minimizer consults an :class:`InjectivityChecker` every iteration when
``stop_at_injectivity`` is enabled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from core.exceptions import InvalidParameterError
from geometry.boundary import boundary_vertex_mask
from geometry.cell_rows import cell_rows
from geometry.measures import min_signed_mesh_area, min_signed_mesh_volume
from geometry.winding import compute_winded_interior_vertices

logger = logging.getLogger("mapping_solver")


@dataclass
class InjectivityReport:
    """Outcome of one injectivity check."""

    min_signed_measure: float
    winded_vertices: list[int]

    @property
    def is_injective(self) -> bool:
        return self.min_signed_measure > 0 and not self.winded_vertices


class InjectivityChecker:
    """Test whether a mapping of a fixed mesh is locally injective.

    Use :meth:`for_triangles` for 2D triangle meshes (winding and inverted
    triangles) and :meth:`for_tets` for tetrahedral meshes (inverted tets).
    The state vector ``x`` is the vertex buffer flattened row by row.
    """

    def __init__(self, cells, dim: int, is_boundary_vertex: np.ndarray | None = None):
        if dim not in (2, 3):
            raise InvalidParameterError("dim", dim, f"dim must be 2 or 3; got {dim}")
        self.dim = dim
        self.cells = cell_rows(cells, dim + 1, "faces" if dim == 2 else "tets")
        self.is_boundary_vertex = is_boundary_vertex

    @classmethod
    def for_triangles(cls, faces, n_vertices: int) -> "InjectivityChecker":
        # Boundary classification depends on connectivity only; compute it once.
        return cls(faces, 2, boundary_vertex_mask(n_vertices, faces))

    @classmethod
    def for_tets(cls, tets) -> "InjectivityChecker":
        return cls(tets, 3)

    def check(self, x: np.ndarray) -> InjectivityReport:
        vertices = np.asarray(x, dtype=float).reshape(-1, self.dim)
        if self.dim == 2:
            return InjectivityReport(
                min_signed_measure=min_signed_mesh_area(vertices, self.cells),
                winded_vertices=compute_winded_interior_vertices(
                    vertices, self.cells, self.is_boundary_vertex
                ),
            )
        return InjectivityReport(
            min_signed_measure=min_signed_mesh_volume(vertices, self.cells),
            winded_vertices=[],
        )

    def __call__(self, x: np.ndarray) -> bool:
        report = self.check(x)
        if not report.is_injective:
            logger.debug(
                "Injectivity violated: min signed measure %.3e, %d winded vertices.",
                report.min_signed_measure,
                len(report.winded_vertices),
            )
        return report.is_injective


__all__ = ["InjectivityReport", "InjectivityChecker"]
