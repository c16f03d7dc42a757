# parameters/global_parameters.py

import json
import logging
import math
from pathlib import Path

import yaml

from core.exceptions import InvalidParameterError

logger = logging.getLogger("mapping_solver")

# Parameters that must be non-negative real numbers.
_FLOAT_KEYS = (
    "xtol_abs",
    "xtol_rel",
    "ftol_abs",
    "ftol_rel",
    "gtol",
    "step_size",
    "line_search_beta",
    "line_search_c",
    "line_search_gamma",
    "alpha_max_factor",
)
_INT_KEYS = ("max_iter", "line_search_max_iter", "max_zero_steps")
_BOOL_KEYS = ("stop_at_injectivity", "trace_iterations", "log_console")


class GlobalParameters:
    def __init__(self, initial_params=None):
        """
        all parameters are defined with underscore, _, instead of spaces
        """
        self._params = {
            # Stagnation tolerances: stop when the energy change or the step
            # falls below the absolute or relative threshold.
            "xtol_abs": 1e-8,
            "xtol_rel": 1e-8,
            "ftol_abs": 1e-8,
            "ftol_rel": 1e-8,
            # Stop when the gradient norm falls below this value.
            "gtol": 1e-8,
            "max_iter": 10000,
            # Check winding / element inversion every iteration and stop
            # once the mapping is no longer locally injective.
            "stop_at_injectivity": False,
            # Initial trial step of the line search.
            "step_size": 1.0,
            # Armijo backtracking controls.
            "line_search_max_iter": 30,
            "line_search_beta": 0.5,
            "line_search_c": 1e-4,
            "line_search_gamma": 1.5,
            "alpha_max_factor": 10.0,
            # Consecutive failed line searches tolerated before giving up.
            "max_zero_steps": 3,
            # Logging. With all three left unset, Minimizer.from_parameters
            # does not touch the logger's handlers.
            "log_file": None,
            "log_level": None,
            "trace_iterations": False,
            # Also log to stderr when logging is configured.
            "log_console": True,
        }
        if initial_params:
            self.update(initial_params)

    def __getattr__(self, name):
        """Attribute access for known parameter keys."""
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            return params[name]
        raise AttributeError(
            f"{type(self).__name__!s} object has no attribute {name!r}"
        )

    def __setattr__(self, name, value):
        """Attribute assignment for known parameter keys."""
        if name == "_params":
            object.__setattr__(self, name, value)
            return
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            params[name] = _coerce(name, value)
            return
        object.__setattr__(self, name, value)

    def get(self, key, default=None):
        """Retrieve a parameter value, or return a default if not found."""
        return self._params.get(key, default)

    def set(self, key, value):
        """Set or update a parameter."""
        self._params[key] = _coerce(key, value)

    def update(self, params):
        """Update multiple parameters at once."""
        for key, value in params.items():
            self.set(key, value)

    def __contains__(self, key):
        return key in self._params

    def __repr__(self):
        return f"GlobalParameters({self._params})"

    def to_dict(self):
        """Convert the parameters to a dictionary for serialization."""
        return dict(self._params)


def _coerce(key, value):
    """Coerce numeric parameters that may parse as strings in YAML."""
    if key in _FLOAT_KEYS:
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(key, value) from exc
        if math.isnan(number) or number < 0:
            raise InvalidParameterError(
                key, value, f"Parameter {key!r} must be a non-negative number; got {value!r}."
            )
        return number
    if key in _INT_KEYS:
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(key, value) from exc
        if number < 0:
            raise InvalidParameterError(
                key, value, f"Parameter {key!r} must be a non-negative integer; got {value!r}."
            )
        return number
    if key in _BOOL_KEYS and isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return value


def load_parameters(filename) -> GlobalParameters:
    """Load solver parameters from a YAML or JSON file.

    The file holds either a flat mapping of parameters or a mapping with a
    ``solver`` section::

        solver:
          ftol_abs: 1e-10
          max_iter: 500
          stop_at_injectivity: true
    """
    filename_str = str(filename)
    with open(filename_str, "r") as f:
        if filename_str.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        elif filename_str.endswith(".json"):
            data = json.load(f)
        else:
            logger.error(f"Unsupported file format for: {filename_str}")
            raise InvalidParameterError(
                "filename",
                filename_str,
                f"Unsupported parameter file format: {Path(filename_str).suffix!r}",
            )

    data = data or {}
    if "solver" in data:
        data = data["solver"] or {}

    params = GlobalParameters(data)
    logger.debug("Loaded solver parameters from %s: %s", filename_str, params)
    return params


__all__ = ["GlobalParameters", "load_parameters"]
