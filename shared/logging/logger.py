import logging
import os
from datetime import datetime
from pathlib import Path

LOG_DIR = Path(os.getenv("VOTODIRECTO_LOG_DIR", "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Console verbosity only; the per-run file always captures DEBUG
CONSOLE_LEVEL = os.getenv("VOTODIRECTO_LOG_LEVEL", "INFO").upper()

_LOGGERS = {}


def get_logger(
    name: str,
    *,
    runtime: str = "votodirecto",
) -> logging.Logger:
    """
    Create or retrieve a named logger.

    Parameters:
    - name: logger namespace (e.g. core.sync, sheets.endpoint)
    - runtime: log file prefix; all loggers of one runtime share a file
    """
    cache_key = f"{runtime}:{name}"
    if cache_key in _LOGGERS:
        return _LOGGERS[cache_key]

    logger = logging.getLogger(cache_key)
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    console = logging.StreamHandler()
    console.setLevel(getattr(logging, CONSOLE_LEVEL, logging.INFO))
    console.setFormatter(formatter)
    logger.addHandler(console)

    file_handler = logging.FileHandler(_run_logfile(runtime), encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.propagate = False
    _LOGGERS[cache_key] = logger

    return logger


_RUN_FILES = {}


def _run_logfile(runtime: str) -> Path:
    # One file per runtime per process, named after the first logger's start
    if runtime not in _RUN_FILES:
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        _RUN_FILES[runtime] = LOG_DIR / f"{runtime}-{timestamp}.log"
    return _RUN_FILES[runtime]
