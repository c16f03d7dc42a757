"""Custom exception types for the mapping solver."""

from __future__ import annotations

from typing import Any


class MappingSolverError(Exception):
    """Base class for domain-specific errors."""


class MeshShapeError(MappingSolverError):
    """Raised when a vertex or connectivity array has the wrong width."""

    def __init__(
        self,
        name: str,
        expected: int,
        shape: tuple[int, ...],
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"{name} must have shape (n, {expected}); got {shape}. "
                "Pass one row per element."
            )
        super().__init__(message)
        self.name = name
        self.expected = expected
        self.shape = shape


class InvalidParameterError(MappingSolverError):
    """Raised when a solver parameter cannot be used as given."""

    def __init__(self, key: str, value: Any, message: str | None = None) -> None:
        if message is None:
            message = f"Invalid value {value!r} for parameter {key!r}."
        super().__init__(message)
        self.key = key
        self.value = value


__all__ = ["MappingSolverError", "MeshShapeError", "InvalidParameterError"]
