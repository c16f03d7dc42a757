"""Handlers for the ``mapping_solver`` logger.

Every module logs to ``mapping_solver``. The minimizer's per-iteration
progress goes to the child logger ``mapping_solver.iterations`` so a run can
trace iterations without turning the rest of the package up to DEBUG.
"""

from __future__ import annotations

import logging

from core.exceptions import InvalidParameterError

LOGGER_NAME = "mapping_solver"
ITERATION_LOGGER_NAME = LOGGER_NAME + ".iterations"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_level(level) -> int:
    """Turn ``"debug"``/``"info"``/``"warning"``/``"error"`` or an int into a level."""
    if isinstance(level, int):
        return level
    try:
        return _LEVELS[str(level).strip().lower()]
    except KeyError as exc:
        raise InvalidParameterError(
            "log_level", level, f"Unknown log level {level!r}; expected one of {sorted(_LEVELS)}."
        ) from exc


def setup_logging(
    log_file: str | None = None,
    *,
    level="info",
    console: bool = True,
    trace_iterations: bool = False,
) -> logging.Logger:
    """Attach fresh handlers to the ``mapping_solver`` logger and return it.

    Calling it again replaces the handlers of the previous call. With
    ``trace_iterations`` the iteration records reach the handlers whatever
    ``level`` is. Records keep propagating to the root logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = True
    logger.setLevel(parse_level(level))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    iteration_logger = logging.getLogger(ITERATION_LOGGER_NAME)
    iteration_logger.setLevel(logging.DEBUG if trace_iterations else logging.NOTSET)
    # Propagated records skip the parent's level, so handlers filter them.
    handler_level = logging.DEBUG if trace_iterations else logger.level

    handlers = []
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="w"))
        except OSError as exc:
            logger.warning("Could not open log file '%s': %s", log_file, exc)
    if console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    for handler in handlers:
        handler.setLevel(handler_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def setup_logging_from_parameters(params) -> logging.Logger | None:
    """Apply the ``log_*`` and ``trace_iterations`` keys of ``params``.

    Returns ``None`` and leaves the logger untouched when none of
    ``log_file``, ``log_level`` or ``trace_iterations`` is set.
    """
    log_file = params.get("log_file")
    level = params.get("log_level")
    trace_iterations = bool(params.get("trace_iterations", False))
    if log_file is None and level is None and not trace_iterations:
        return None
    return setup_logging(
        log_file,
        level=level if level is not None else "info",
        console=bool(params.get("log_console", True)),
        trace_iterations=trace_iterations,
    )


__all__ = [
    "LOGGER_NAME",
    "ITERATION_LOGGER_NAME",
    "parse_level",
    "setup_logging",
    "setup_logging_from_parameters",
]
