from __future__ import annotations

import logging
from typing import Callable

import numpy as np

logger = logging.getLogger("mapping_solver")


def backtracking_line_search(
    x: np.ndarray,
    direction: np.ndarray,
    gradient: np.ndarray,
    step_size: float,
    energy_fn: Callable[[np.ndarray], float],
    energy0: float | None = None,
    max_iter: int = 30,
    beta: float = 0.5,
    c: float = 1e-4,
    gamma: float = 1.5,
    alpha_max_factor: float = 10.0,
    alpha_min: float = 1e-12,
) -> tuple[bool, float, np.ndarray, float]:
    """Armijo backtracking line search along ``direction``.

    Parameters
    ----------
    x : np.ndarray
        Current state vector. Not modified.
    direction : np.ndarray
        Descent direction, same shape as ``x``.
    gradient : np.ndarray
        Gradient at ``x``.
    step_size : float
        Initial step size to try.
    energy_fn : Callable[[np.ndarray], float]
        Function returning the energy of a state vector. Non-finite values
        (e.g. barrier energies outside their domain) are always rejected.
    energy0 : float, optional
        Energy at ``x``; evaluated when not given.
    max_iter : int, optional
        Maximum number of backtracking iterations, by default ``30``.
    beta : float, optional
        Step size reduction factor, by default ``0.5``.
    c : float, optional
        Armijo condition parameter, by default ``1e-4``.
    gamma : float, optional
        Step size growth factor on success, by default ``1.5``.
    alpha_max_factor : float, optional
        Maximum allowed multiplier for ``step_size`` on success, by default ``10.0``.
    alpha_min : float, optional
        Give up once the trial step size drops below this value.

    Returns
    -------
    tuple[bool, float, np.ndarray, float]
        Whether the step succeeded, the updated step size, the accepted state
        (``x`` on failure) and its energy.
    """
    if energy0 is None:
        energy0 = energy_fn(x)

    g_dot_d = float(np.dot(gradient, direction))
    if g_dot_d >= 0:
        logger.debug("Non-descent direction provided; skipping step.")
        return False, step_size, x, energy0

    alpha = step_size
    alpha_max = alpha_max_factor * step_size

    backtracks = 0
    for _ in range(max_iter):
        x_trial = x + alpha * direction
        trial_energy = energy_fn(x_trial)
        if trial_energy <= energy0 + c * alpha * g_dot_d:
            logger.debug(
                "Line search success: alpha=%.3e, backtracks=%d, E0=%.6e, Etrial=%.6e",
                alpha,
                backtracks,
                energy0,
                trial_energy,
            )
            new_step = min(alpha * gamma, alpha_max)
            return True, new_step, x_trial, float(trial_energy)

        alpha *= beta
        backtracks += 1
        if alpha < alpha_min:
            break

    logger.debug(
        "Line search failed after %d backtracks (alpha reached %.2e).",
        backtracks,
        alpha,
    )
    return False, step_size * beta, x, energy0
