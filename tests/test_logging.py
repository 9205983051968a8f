import io
import logging

import pytest

from lpviz import logging as lpviz_logging
from lpviz.logging import SolveLog, configure_logging, get_logger, set_log_level


@pytest.fixture(autouse=True)
def restore_loggers():
    saved = {
        name: (logger.level, list(logger.handlers), [h.level for h in logger.handlers])
        for name, logger in lpviz_logging._loggers.items()
    }
    default = lpviz_logging._DEFAULT_LEVEL
    yield
    for name, logger in lpviz_logging._loggers.items():
        if name not in saved:
            continue
        level, handlers, handler_levels = saved[name]
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        for handler, handler_level in zip(handlers, handler_levels):
            handler.setLevel(handler_level)
            logger.addHandler(handler)
    lpviz_logging._DEFAULT_LEVEL = default


def test_get_logger_namespaces_and_caches():
    logger = get_logger("solvers")

    assert logger.name == "lpviz.solvers"
    assert get_logger("lpviz.solvers") is logger
    assert get_logger().name == "lpviz"
    assert not logger.propagate


def test_set_log_level_applies_to_existing_and_new_loggers():
    existing = get_logger("lpviz.lp.simplex")
    set_log_level("debug")

    assert existing.level == logging.DEBUG
    assert all(handler.level == logging.DEBUG for handler in existing.handlers)
    assert get_logger("created_after_level_change").level == logging.DEBUG


def test_configure_logging_replaces_handlers():
    stream = io.StringIO()
    logger = get_logger("lpviz.lp.central_path")
    configure_logging("INFO", format_string="%(name)s|%(message)s", stream=stream)

    assert len(logger.handlers) == 1
    logger.info("skipped mu")
    logger.debug("not shown")
    assert stream.getvalue() == "lpviz.lp.central_path|skipped mu\n"


def test_solve_log_forwards_to_sink_and_verbose_logger():
    stream = io.StringIO()
    logger = get_logger("lpviz.lp.ipm")
    configure_logging(logging.INFO, format_string="%(message)s", stream=stream)

    received = []
    quiet = SolveLog(logger, received.append)
    quiet.emit("row 1\n")
    assert quiet.lines == ["row 1\n"] and received == ["row 1\n"]
    assert stream.getvalue() == ""

    loud = SolveLog(logger, verbose=True)
    loud.emit("row 2\n")
    assert len(loud) == 1
    assert stream.getvalue() == "row 2\n"
