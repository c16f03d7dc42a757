"""Gradient descent stepper with backtracking line search."""

from __future__ import annotations

from typing import Callable

import numpy as np

from runtime.steppers.line_search import backtracking_line_search

from .base import BaseStepper


class GradientDescent(BaseStepper):
    """Perform gradient descent using Armijo backtracking."""

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

    def step(
        self,
        x: np.ndarray,
        grad: np.ndarray,
        step_size: float,
        energy_fn: Callable[[np.ndarray], float],
        energy0: float | None = None,
    ) -> tuple[bool, float, np.ndarray, float]:
        """Apply one gradient descent step with backtracking line search."""

        return backtracking_line_search(
            x,
            -grad,
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
