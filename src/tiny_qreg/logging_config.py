"""
Logging for tiny-qreg.

Every module logs through ``get_logger(__name__)``, which places it under
the ``tiny_qreg`` logger. ``setup_logging`` is called once by the CLI;
library users who never call it get Python's default (silent) handling.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = "tiny_qreg"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """Turn ``"debug"``, ``"INFO"`` or ``logging.WARNING`` into a level number."""
    if isinstance(level, int):
        return level
    number = logging.getLevelName(str(level).upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level}")
    return number


def _handler(handler: logging.Handler, level: int,
             formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Route the ``tiny_qreg`` logger tree to stderr, and to ``log_file`` if given.

    Calling it again replaces the handlers installed by the previous call.
    Returns the ``tiny_qreg`` logger.
    """
    level = resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(_handler(logging.StreamHandler(sys.stderr), level, formatter))

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_handler(logging.FileHandler(path), level, formatter))

    return root


def get_logger(name: str) -> logging.Logger:
    """
    Logger for ``name`` under the ``tiny_qreg`` tree.

    Accepts a bare name ("engine") or a module ``__name__``
    ("tiny_qreg.engine").
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
