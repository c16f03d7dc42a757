"""Shared state and stopping rules for iterative optimizers.

A concrete optimizer implements :meth:`Solver.optimize` and owns a
:class:`SolverState` (current iterate, energy, iteration count, stop reason)
and a :class:`ConvergenceCriteria` (tolerances). The stagnation test lives on
the criteria; gradient-norm, iteration-budget, injectivity and failure stops
are decided by the optimizer loop using the same :class:`StopType` values.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from runtime.energy import EnergyFormulation

logger = logging.getLogger("mapping_solver")


class StopType(Enum):
    """Why an optimization run stopped."""

    UNKNOWN = "unknown"
    XTOL_REACHED = "xtol reached"
    FTOL_REACHED = "ftol reached"
    GTOL_REACHED = "gtol reached"
    MAX_ITER_REACHED = "max iteration reached"
    INJECTIVITY_VIOLATED = "injectivity violated"
    FAILURE = "failure"
    SUCCESS = "success"

    @property
    def is_terminal(self) -> bool:
        return self is not StopType.UNKNOWN

    def __str__(self) -> str:
        return self.value


@dataclass
class ConvergenceCriteria:
    """Tolerances and budgets shared by all optimizers."""

    xtol_abs: float = 1e-8
    xtol_rel: float = 1e-8
    ftol_abs: float = 1e-8
    ftol_rel: float = 1e-8
    gtol: float = 1e-8
    max_iter: int = 10000
    stop_at_injectivity: bool = False

    @classmethod
    def from_parameters(cls, params) -> "ConvergenceCriteria":
        """Build criteria from a :class:`GlobalParameters` (or any ``get``-able)."""
        defaults = cls()
        return cls(
            xtol_abs=float(params.get("xtol_abs", defaults.xtol_abs)),
            xtol_rel=float(params.get("xtol_rel", defaults.xtol_rel)),
            ftol_abs=float(params.get("ftol_abs", defaults.ftol_abs)),
            ftol_rel=float(params.get("ftol_rel", defaults.ftol_rel)),
            gtol=float(params.get("gtol", defaults.gtol)),
            max_iter=int(params.get("max_iter", defaults.max_iter)),
            stop_at_injectivity=bool(
                params.get("stop_at_injectivity", defaults.stop_at_injectivity)
            ),
        )

    def is_stagnant(
        self, energy: float, energy_next: float, x_norm: float, step_norm: float
    ) -> StopType | None:
        """Return the stagnation reason for one step, or ``None``.

        Energy tolerances are checked before step tolerances; absolute before
        relative. The first satisfied test decides the result.
        """
        if abs(energy_next - energy) < self.ftol_abs:
            return StopType.FTOL_REACHED
        if energy != 0 and abs((energy_next - energy) / energy) < self.ftol_rel:
            return StopType.FTOL_REACHED
        if step_norm < self.xtol_abs:
            return StopType.XTOL_REACHED
        if x_norm != 0 and step_norm / x_norm < self.xtol_rel:
            return StopType.XTOL_REACHED
        return None


@dataclass
class SolverState:
    """Mutable bookkeeping of one optimization run."""

    x: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=float))
    energy: float = math.inf
    num_iter: int = 0
    stop_type: StopType = StopType.UNKNOWN

    def reset(self) -> None:
        self.x = np.zeros(0, dtype=float)
        self.energy = math.inf
        self.num_iter = 0
        self.stop_type = StopType.UNKNOWN

    def stop(self, stop_type: StopType) -> bool:
        """Record the stop reason; only the first reason after a reset sticks."""
        if self.stop_type.is_terminal:
            logger.debug(
                "Ignoring stop reason '%s'; run already stopped with '%s'.",
                stop_type,
                self.stop_type,
            )
            return False
        self.stop_type = stop_type
        return True


class Solver(ABC):
    """Interface of an iterative optimizer with shared convergence state."""

    def __init__(self, criteria: ConvergenceCriteria | None = None) -> None:
        self.criteria = criteria if criteria is not None else ConvergenceCriteria()
        self.state = SolverState()

    @abstractmethod
    def optimize(self, energy: EnergyFormulation, x0: np.ndarray) -> None:
        """Minimize ``energy`` starting from ``x0``.

        Implementations reset :attr:`state` first and leave the final iterate,
        energy, iteration count and stop reason in it.
        """

    def reset(self) -> None:
        self.state.reset()

    def is_stagnant(
        self, energy: float, energy_next: float, x_norm: float, step_norm: float
    ) -> StopType | None:
        return self.criteria.is_stagnant(energy, energy_next, x_norm, step_norm)

    def get_x(self) -> np.ndarray:
        return self.state.x.copy()

    def get_energy(self) -> float:
        return self.state.energy

    def get_stop_type(self) -> StopType:
        return self.state.stop_type

    def get_num_iter(self) -> int:
        return self.state.num_iter

    def __repr__(self) -> str:  # pragma: no cover - simple utility
        return f"{self.__class__.__name__}(criteria={self.criteria!r})"


__all__ = ["StopType", "ConvergenceCriteria", "SolverState", "Solver"]
