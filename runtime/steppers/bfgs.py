"""Quasi-Newton BFGS stepper with backtracking line search."""

from __future__ import annotations

from typing import Callable

import numpy as np

from runtime.steppers.line_search import backtracking_line_search

from .base import BaseStepper


class BFGS(BaseStepper):
    """BFGS stepper using a dense inverse-Hessian approximation.

    This is intended for moderate-sized problems; the approximation is reset
    when the length of the state vector changes.
    """

    def __init__(
        self,
        max_iter: int = 30,
        beta: float = 0.5,
        c: float = 1e-4,
        gamma: float = 1.5,
        alpha_max_factor: float = 10.0,
    ) -> None:
        self.max_iter = max_iter
        self.beta = beta
        self.c = c
        self.gamma = gamma
        self.alpha_max_factor = alpha_max_factor
        self._prev_x: np.ndarray | None = None
        self._prev_grad: np.ndarray | None = None
        self._H_inv: np.ndarray | None = None

    def reset(self) -> None:
        self._prev_x = None
        self._prev_grad = None
        self._H_inv = None

    def step(
        self,
        x: np.ndarray,
        grad: np.ndarray,
        step_size: float,
        energy_fn: Callable[[np.ndarray], float],
        energy0: float | None = None,
    ) -> tuple[bool, float, np.ndarray, float]:
        """Take one BFGS step with line search."""

        if self._H_inv is not None and self._H_inv.shape[0] != len(x):
            self.reset()

        if self._H_inv is None:
            self._H_inv = np.eye(len(x), dtype=float)

        if self._prev_x is not None and self._prev_grad is not None:
            s = x - self._prev_x
            y = grad - self._prev_grad
            ys = float(np.dot(y, s))
            if ys > 1e-12:
                rho = 1.0 / ys
                I_n = np.eye(len(x), dtype=float)
                V = I_n - rho * np.outer(s, y)
                self._H_inv = V @ self._H_inv @ V.T + rho * np.outer(s, s)
            else:
                # If curvature condition fails, reset the approximation.
                self._H_inv = np.eye(len(x), dtype=float)

        direction = -self._H_inv.dot(grad)
        success, new_step, x_new, accepted_energy = backtracking_line_search(
            x,
            direction,
            grad,
            step_size,
            energy_fn,
            energy0=energy0,
            max_iter=self.max_iter,
            beta=self.beta,
            c=self.c,
            gamma=self.gamma,
            alpha_max_factor=self.alpha_max_factor,
        )

        if success:
            self._prev_x = x.copy()
            self._prev_grad = grad.copy()
        else:
            # Restart from steepest descent after a failed search.
            self._H_inv = None
            self._prev_x = None
            self._prev_grad = None

        return success, new_step, x_new, float(accepted_energy)
