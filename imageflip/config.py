"""Application configuration. Loads from environment and .env file."""
import logging
import os
import sys

from dotenv import load_dotenv

# Load .env from cwd
load_dotenv()

# Concurrency (default: available parallelism)
MAX_WORKERS = int(os.getenv("MAX_WORKERS", str(os.cpu_count() or 4)))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("imageflip")


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Send progress to stdout and failures to stderr, one line per event."""
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    out_handler = logging.StreamHandler(sys.stdout)
    out_handler.addFilter(_BelowWarning())
    out_handler.setFormatter(formatter)

    err_handler = logging.StreamHandler(sys.stderr)
    err_handler.setLevel(logging.WARNING)
    err_handler.setFormatter(formatter)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(out_handler)
    logger.addHandler(err_handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
