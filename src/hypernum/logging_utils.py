"""Logging utilities for hypernum.

Provides a consistent logger hierarchy under the ``hypernum`` namespace
without modifying the process root logger. Library code obtains loggers via
get_logger(); applications opt in to output via configure_logging().
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "hypernum"

_FORMAT = logging.Formatter("%(levelname)s %(name)s: %(message)s")


def _ensure_root(attach_stream: bool = False) -> logging.Logger:
    """Return the "hypernum" logger, isolated from the process root logger.

    A stdout StreamHandler is attached only when ``attach_stream`` is set
    and no real handler is present yet; NullHandlers are replaced.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if attach_stream:
        has_non_null = any(not isinstance(h, logging.NullHandler) for h in root.handlers)
        if not has_non_null:
            for h in list(root.handlers):
                root.removeHandler(h)
            handler = logging.StreamHandler(stream=sys.stdout)
            handler.setFormatter(_FORMAT)
            root.addHandler(handler)
        root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """Configure the "hypernum" logger family level and attach a stdout handler.

    This does NOT modify the process root logger.
    """
    root = _ensure_root(attach_stream=True)
    root.setLevel(_to_level(level))
    return root


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the "hypernum" namespace.

    Names outside the namespace are prefixed, so ``get_logger("ledger")``
    and ``get_logger("hypernum.ledger")`` return the same logger. Without an
    explicit level the logger inherits from the "hypernum" parent.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    log = logging.getLogger(name)
    log.setLevel(_to_level(level) if level is not None else logging.NOTSET)
    return log


__all__ = ["ROOT_LOGGER_NAME", "get_logger", "configure_logging"]
