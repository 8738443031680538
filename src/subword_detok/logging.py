from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_console_handler: Optional[logging.Handler] = None


def parse_level(value: str | int) -> int:
    """Map a level name such as ``"debug"`` or a numeric level to an int."""
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value}")
    return level


def configure_logging(level: int = logging.WARNING, fmt: Optional[str] = None) -> None:
    global _console_handler
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    root.addHandler(handler)
    _console_handler = handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_file_logging(log_path: Path, *, level: int = logging.DEBUG) -> None:
    logger = logging.getLogger()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(log_path.absolute()):
            return
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    logger.addHandler(file_handler)
    if logger.level > level:
        # stderr keeps the level it was configured with
        if _console_handler is not None and _console_handler.level == logging.NOTSET:
            _console_handler.setLevel(logger.level)
        logger.setLevel(level)
