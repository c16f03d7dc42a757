"""Steppers and line search used by the minimizer."""

from .base import BaseStepper
from .bfgs import BFGS
from .gradient_descent import GradientDescent
from .line_search import backtracking_line_search

__all__ = ["BaseStepper", "BFGS", "GradientDescent", "backtracking_line_search"]
