from __future__ import annotations

import logging
import logging.handlers
import os
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for the command line.

    Console output goes to stderr so stdout stays clean for JSON artifacts.
    LOG_LEVEL picks the level (default INFO); LOG_FILE, when set, adds a
    rotating file handler.  Library code only ever calls logging.getLogger.
    """
    formatter = logging.Formatter(LOG_FORMAT)

    # Drop existing handlers to avoid duplicate output on repeated setup.
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.root.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logging.root.addHandler(console_handler)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logging.root.addHandler(file_handler)

    logging.captureWarnings(True)
