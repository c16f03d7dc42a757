import math

import numpy as np

# Closed surface of a tetrahedron, outward oriented.
TETRA_SURFACE_FACES = np.array(
    [[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]], dtype=int
)

UNIT_TET_VERTICES = np.array(
    [
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
    ]
)

# Two positively oriented tets glued along the face (0, 1, 2).
TWO_TET_VERTICES = np.array(
    [
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
        [0.0, 0.0, -1.0],
    ]
)
TWO_TET_CELLS = np.array([[0, 1, 2, 3], [0, 2, 1, 4]], dtype=int)


def fan_disk(n: int = 6, radius: float = 1.0, turns: int = 1, center=(0.0, 0.0)):
    """Triangle fan around vertex 0 with ``n`` ring vertices.

    The ring vertices are spread over ``turns`` full turns, so ``turns=2``
    gives a one-ring that wraps twice around the center.
    """
    angles = 2 * math.pi * turns * np.arange(n) / n
    ring = radius * np.column_stack((np.cos(angles), np.sin(angles)))
    vertices = np.vstack((np.asarray(center, dtype=float), ring))
    faces = np.array([[0, 1 + k, 1 + (k + 1) % n] for k in range(n)], dtype=int)
    return vertices, faces


def square_grid(nx: int = 3, ny: int = 3, jitter: float = 0.0, seed: int = 0):
    """Counter-clockwise triangulation of the unit square with (nx+1)*(ny+1) vertices."""
    xs, ys = np.meshgrid(np.linspace(0.0, 1.0, nx + 1), np.linspace(0.0, 1.0, ny + 1))
    vertices = np.column_stack((xs.ravel(), ys.ravel()))
    if jitter:
        rng = np.random.default_rng(seed)
        vertices = vertices + jitter * rng.uniform(-1.0, 1.0, vertices.shape)

    faces = []
    for j in range(ny):
        for i in range(nx):
            v00 = j * (nx + 1) + i
            v10 = v00 + 1
            v01 = v00 + nx + 1
            v11 = v01 + 1
            faces.append([v00, v10, v11])
            faces.append([v00, v11, v01])
    return vertices, np.array(faces, dtype=int)
