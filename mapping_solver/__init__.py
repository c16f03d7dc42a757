"""Package utilities for mapping-solver.

The solver core lives in top-level packages: `geometry/` (angles, measures,
boundary extraction, winding), `runtime/` (solver state, minimizer, steppers)
and `core/` (exceptions, parameters). This package only exposes the
distribution version.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mapping-solver")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
