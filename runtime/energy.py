# runtime/energy.py
"""Interface for the energy functionals minimized by a :class:`~runtime.solver.Solver`."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class EnergyFormulation(ABC):
    """An energy over a flat state vector ``x`` (e.g. stacked vertex positions)."""

    @abstractmethod
    def compute_energy_and_gradient(
        self, x: np.ndarray, *, compute_gradient: bool = True
    ) -> tuple[float, np.ndarray | None]:
        """Return the energy at ``x`` and, if requested, its gradient.

        The gradient has the shape of ``x``. With ``compute_gradient=False``
        the second item is ``None``.
        """

    def compute_energy(self, x: np.ndarray) -> float:
        """Return only the energy at ``x``."""
        energy, _ = self.compute_energy_and_gradient(x, compute_gradient=False)
        return float(energy)

    def __repr__(self) -> str:  # pragma: no cover - simple utility
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{self.__class__.__name__}({params})"


__all__ = ["EnergyFormulation"]
