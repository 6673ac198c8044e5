"""Log file setup.

The TUI owns the terminal, so records only go to a file under the config
directory.
"""

from __future__ import annotations

import logging as py_logging
from pathlib import Path

from .config import CONFIG_DIR

LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
DEFAULT_LOG_PATH = CONFIG_DIR / "logs" / "prtui.log"
_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> py_logging.Logger:
    """Attach a file handler to the `prtui` logger.

    Args:
        level: Level name; unknown names fall back to INFO.
        log_file: Destination file; defaults to `DEFAULT_LOG_PATH`.

    Returns:
        The configured package logger. When the log file cannot be created
        the logger is left without handlers and records are dropped.
    """
    resolved = LOG_LEVELS.get(level.upper(), py_logging.INFO)

    logger = py_logging.getLogger("prtui")
    logger.setLevel(resolved)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(py_logging.NullHandler())

    log_path = Path(log_file).expanduser() if log_file else DEFAULT_LOG_PATH
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = py_logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        pass
    else:
        file_handler.setLevel(resolved)
        file_handler.setFormatter(py_logging.Formatter(_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
