import os
import sys

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.exceptions import InvalidParameterError, MappingSolverError, MeshShapeError
from geometry.measures import signed_tri_areas, total_signed_mesh_volume


def test_wrong_face_width_raises_custom_error():
    vertices = np.zeros((4, 2))
    with pytest.raises(MeshShapeError) as excinfo:
        signed_tri_areas(vertices, [[0, 1, 2, 3]])
    assert "faces must have shape (n, 3)" in str(excinfo.value)
    assert excinfo.value.shape == (1, 4)


def test_wrong_vertex_dimension_raises_custom_error():
    with pytest.raises(MeshShapeError) as excinfo:
        total_signed_mesh_volume(np.zeros((4, 2)), [[0, 1, 2, 3]])
    assert "vertices must have shape (n, d)" in str(excinfo.value)


def test_error_hierarchy():
    assert issubclass(MeshShapeError, MappingSolverError)
    assert issubclass(InvalidParameterError, MappingSolverError)
    err = InvalidParameterError("gtol", "tiny")
    assert str(err) == "Invalid value 'tiny' for parameter 'gtol'."
