"""
Logging configuration for MeasureLabel
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that flood DEBUG output (font lookups, TIFF tag parsing)
QUIET_LOGGERS = ("matplotlib", "PIL")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    debug: bool = False,
    format_string: str = LOG_FORMAT
) -> logging.Logger:
    """
    Send MeasureLabel logs to stdout and optionally a file

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Measurement log kept next to the exported images
        debug: Force DEBUG regardless of level
        format_string: Record format for every handler

    Returns:
        The "measurelabel" package logger

    Raises:
        ValueError: If level is not a logging level name
    """
    numeric_level = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=format_string, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logger = logging.getLogger("measurelabel")
    logger.info(f"Logging at {logging.getLevelName(numeric_level)}"
                + (f", also to {log_file}" if log_file else ""))
    return logger
