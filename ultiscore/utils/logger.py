import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

_LOGGERS: Dict[str, logging.Logger] = {}
_FILE_HANDLER: Optional[logging.Handler] = None

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_log_dir(log_dir: Optional[str]) -> Optional[Path]:
    """
    Send every ultiscore logger to a per-run log file in ``log_dir``.

    Loggers already handed out pick up the file too. Passing None (the
    default state) goes back to console-only logging.

    Returns:
        Path of the log file, or None
    """
    global _FILE_HANDLER
    if _FILE_HANDLER is not None:
        for logger in _LOGGERS.values():
            logger.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    if not log_dir:
        return None

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    logfile = directory / f"ultiscore-{timestamp}.log"

    _FILE_HANDLER = logging.FileHandler(logfile, encoding="utf-8")
    _FILE_HANDLER.setFormatter(logging.Formatter(_FORMAT))
    for logger in _LOGGERS.values():
        logger.addHandler(_FILE_HANDLER)
    return logfile


def get_logger(name: str) -> logging.Logger:
    """
    Create or retrieve a named logger.

    Parameters:
    - name: logger namespace (e.g. services.match_controller)
    """
    if name in _LOGGERS:
        return _LOGGERS[name]

    logger = logging.getLogger(f"ultiscore.{name}")
    logger.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(console)

    if _FILE_HANDLER is not None:
        logger.addHandler(_FILE_HANDLER)

    logger.propagate = False
    _LOGGERS[name] = logger

    return logger
