# runtime/steppers/base.py
"""Abstract base class for optimization steppers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

import numpy as np


class BaseStepper(ABC):
    """Base interface for classes proposing one optimization step."""

    @abstractmethod
    def step(
        self,
        x: np.ndarray,
        grad: np.ndarray,
        step_size: float,
        energy_fn: Callable[[np.ndarray], float],
        energy0: float | None = None,
    ) -> tuple[bool, float, np.ndarray, float]:
        """Propose the next iterate from ``x`` along a descent direction.

        Parameters
        ----------
        x : np.ndarray
            Current flat state vector. Not modified.
        grad : np.ndarray
            Energy gradient at ``x``.
        step_size : float
            Proposed step size.
        energy_fn : Callable[[np.ndarray], float]
            Function returning the energy of a state vector.
        energy0 : float, optional
            Energy at ``x`` if already known.

        Returns
        -------
        tuple[bool, float, np.ndarray, float]
            Whether a step was accepted, the step size to use next, the new
            iterate (``x`` itself on failure) and its energy.
        """

    def reset(self) -> None:
        """Forget any history carried between steps."""

    def __repr__(self) -> str:  # pragma: no cover - simple utility
        params = ", ".join(
            f"{k}={v!r}" for k, v in vars(self).items() if not k.startswith("_")
        )
        return f"{self.__class__.__name__}({params})"
