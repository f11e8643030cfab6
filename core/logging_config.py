"""Logging setup for the quotation backend.

Everything logs through stdlib ``logging`` under the ``furniture_quote``
namespace so one call to :func:`configure_logging` controls the whole app.
"""

import logging
import sys

__all__ = ["configure_logging", "get_logger", "reset_logging"]

_LOGGER_PREFIX = "furniture_quote"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the furniture_quote namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a single stream handler to the namespace root logger.

    Safe to call more than once; later calls only change the level.
    """
    global _configured
    root = logging.getLogger(_LOGGER_PREFIX)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _configured = True
    return root


def reset_logging() -> None:
    """Remove handlers installed by configure_logging (used by tests)."""
    global _configured
    root = logging.getLogger(_LOGGER_PREFIX)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.propagate = True
    _configured = False
