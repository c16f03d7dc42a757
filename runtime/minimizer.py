# runtime/minimizer.py

import logging
from typing import Callable, Optional

import numpy as np

from runtime.energy import EnergyFormulation
from runtime.logging_config import ITERATION_LOGGER_NAME, setup_logging_from_parameters
from runtime.solver import ConvergenceCriteria, Solver, StopType
from runtime.steppers.base import BaseStepper
from runtime.steppers.gradient_descent import GradientDescent

logger = logging.getLogger("mapping_solver")
iteration_logger = logging.getLogger(ITERATION_LOGGER_NAME)


class Minimizer(Solver):
    """Coordinate the optimization loop for a flat state vector.

    Each iteration checks, in order: injectivity (only with
    ``criteria.stop_at_injectivity`` and an ``injectivity_check``), finiteness
    of the energy and gradient, the gradient tolerance and the iteration
    budget. It then asks the stepper for a step and applies the stagnation
    test to it. A stagnation stop on an iterate that fails the injectivity
    check is reported as ``INJECTIVITY_VIOLATED`` instead.
    """

    def __init__(
        self,
        stepper: Optional[BaseStepper] = None,
        criteria: Optional[ConvergenceCriteria] = None,
        injectivity_check: Optional[Callable[[np.ndarray], bool]] = None,
        step_size: float = 1.0,
        max_zero_steps: int = 3,
    ) -> None:
        super().__init__(criteria)
        self.stepper = stepper if stepper is not None else GradientDescent()
        self.injectivity_check = injectivity_check
        self.step_size = step_size
        self.max_zero_steps = max_zero_steps

    @classmethod
    def from_parameters(
        cls,
        params,
        stepper: Optional[BaseStepper] = None,
        injectivity_check: Optional[Callable[[np.ndarray], bool]] = None,
    ) -> "Minimizer":
        """Build a minimizer from a :class:`GlobalParameters`.

        The logging keys of ``params`` (``log_file``, ``log_level``,
        ``trace_iterations``, ``log_console``) are applied here.
        """
        setup_logging_from_parameters(params)
        if stepper is None:
            stepper = GradientDescent(
                max_iter=int(params.get("line_search_max_iter", 30)),
                beta=float(params.get("line_search_beta", 0.5)),
                c=float(params.get("line_search_c", 1e-4)),
                gamma=float(params.get("line_search_gamma", 1.5)),
                alpha_max_factor=float(params.get("alpha_max_factor", 10.0)),
            )
        return cls(
            stepper=stepper,
            criteria=ConvergenceCriteria.from_parameters(params),
            injectivity_check=injectivity_check,
            step_size=float(params.get("step_size", 1.0)),
            max_zero_steps=int(params.get("max_zero_steps", 3)),
        )

    def __repr__(self):
        msg = f"""### MINIMIZER ###
STEPPER:\t {self.stepper}
CRITERIA:\t {self.criteria}
STEP SIZE:\t {self.step_size}
############"""
        return msg

    def _injectivity_violated(self, x: np.ndarray) -> bool:
        return (
            self.criteria.stop_at_injectivity
            and self.injectivity_check is not None
            and not self.injectivity_check(x)
        )

    def _stop(self, stop_type: StopType, message: str, *args) -> None:
        self.state.stop(stop_type)
        logger.info("Stopped after %d iterations (%s): " + message,
                    self.state.num_iter, stop_type, *args)

    def optimize(
        self,
        energy: EnergyFormulation,
        x0: np.ndarray,
        callback: Optional[Callable[[np.ndarray, int], None]] = None,
    ) -> None:
        """Run the optimization loop from ``x0`` until a stop reason is reached."""
        self.reset()
        self.stepper.reset()
        criteria = self.criteria
        state = self.state

        x = np.array(x0, dtype=float).ravel()
        E, grad = energy.compute_energy_and_gradient(x)
        state.x = x
        state.energy = float(E)

        step_size = self.step_size
        zero_step_counter = 0

        while not state.stop_type.is_terminal:
            if callback:
                callback(x, state.num_iter)

            if self._injectivity_violated(x):
                self._stop(StopType.INJECTIVITY_VIOLATED, "mapping is not locally injective.")
                break

            if not np.isfinite(E) or not np.all(np.isfinite(grad)):
                self._stop(StopType.FAILURE, "non-finite energy or gradient (E=%s).", E)
                break

            grad_norm = float(np.linalg.norm(grad))
            if grad_norm < criteria.gtol:
                self._stop(StopType.GTOL_REACHED, "|∇E|=%.3e.", grad_norm)
                break

            if state.num_iter >= criteria.max_iter:
                self._stop(StopType.MAX_ITER_REACHED, "E=%.6e, |∇E|=%.3e.", E, grad_norm)
                break

            iteration_logger.debug(
                "Iteration %d: E=%.6e, |∇E|=%.3e, step size=%.2e",
                state.num_iter,
                E,
                grad_norm,
                step_size,
            )

            step_success, step_size, x_next, E_next = self.stepper.step(
                x, grad, step_size, energy.compute_energy, energy0=E
            )
            if not step_success:
                zero_step_counter += 1
                self.stepper.reset()
                if zero_step_counter >= self.max_zero_steps:
                    self._stop(
                        StopType.FAILURE,
                        "line search failed %d consecutive times.",
                        zero_step_counter,
                    )
                    break
                continue
            zero_step_counter = 0

            stagnation = self.is_stagnant(
                E,
                E_next,
                float(np.linalg.norm(x)),
                float(np.linalg.norm(x_next - x)),
            )

            x = x_next
            E, grad = energy.compute_energy_and_gradient(x)
            state.x = x
            state.energy = float(E)
            state.num_iter += 1

            if stagnation is not None:
                # The final iterate must not be a folded one.
                if self._injectivity_violated(x):
                    self._stop(StopType.INJECTIVITY_VIOLATED, "mapping is not locally injective.")
                else:
                    self._stop(stagnation, "E=%.6e.", E)


__all__ = ["Minimizer"]
