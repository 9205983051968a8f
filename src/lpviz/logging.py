"""Logging helpers for the lpviz solvers.

Solvers never print. They hand each formatted log line to a sink and, when
``verbose`` is set, to a logger obtained here.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional

_DEFAULT_LEVEL = logging.WARNING
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}

LogSink = Callable[[str], None]


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached ``lpviz.*`` logger for ``name`` (usually ``__name__``)."""
    if name is None:
        name = "lpviz"
    logger_name = name if name == "lpviz" or name.startswith("lpviz.") else f"lpviz.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the level of every lpviz logger, including ones created later."""
    global _DEFAULT_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Replace the handlers of all lpviz loggers with one writing to ``stream``."""
    global _DEFAULT_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    formatter = logging.Formatter(format_string or _FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    _DEFAULT_LEVEL = level


class SolveLog:
    """Collects the formatted lines of one solve and forwards them.

    Lines are stored in order, passed to ``sink`` if one is given and, when
    ``verbose`` is set, emitted at INFO on ``logger``.
    """

    def __init__(
        self,
        logger: logging.Logger,
        sink: Optional[LogSink] = None,
        verbose: bool = False,
    ) -> None:
        self.lines: List[str] = []
        self._logger = logger
        self._sink = sink
        self._verbose = verbose

    def emit(self, line: str) -> None:
        self.lines.append(line)
        if self._sink is not None:
            self._sink(line)
        if self._verbose:
            self._logger.info(line.rstrip("\n"))

    def __len__(self) -> int:
        return len(self.lines)
