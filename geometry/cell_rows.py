"""Helpers for coercing vertex buffers and element connectivity to row arrays."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from core.exceptions import MeshShapeError


def cell_rows(cells, width: int, name: str = "cells") -> np.ndarray:
    """Return ``cells`` as an ``(n, width)`` integer array, one element per row.

    An empty sequence yields an empty ``(0, width)`` array.
    """
    rows = np.asarray(cells, dtype=np.int64)
    if rows.size == 0:
        return rows.reshape(0, width)
    if rows.ndim != 2 or rows.shape[1] != width:
        raise MeshShapeError(name, width, tuple(rows.shape))
    return rows


def vertex_rows(vertices, dims: Iterable[int] = (2, 3), name: str = "vertices") -> np.ndarray:
    """Return ``vertices`` as a float array of shape ``(n, d)`` with ``d`` in ``dims``."""
    points = np.asarray(vertices, dtype=float)
    dims = tuple(dims)
    if points.ndim != 2 or points.shape[1] not in dims:
        raise MeshShapeError(
            name,
            dims[0],
            tuple(points.shape),
            message=f"{name} must have shape (n, d) with d in {dims}; got {points.shape}.",
        )
    return points


__all__ = ["cell_rows", "vertex_rows"]
