"""Process-wide log format for the preview service: UTC ISO timestamps, logger name, message."""

import logging
import time

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"

# HTTP client loggers that emit one INFO line per request
QUIET_LOGGERS = ("httpx", "httpcore")


class UTCFormatter(logging.Formatter):
    """Formatter whose asctime is UTC, matching the Z suffix in LOG_DATEFMT."""

    converter = time.gmtime


def configure_logging(level: int | str = logging.INFO) -> None:
    """Install one UTC-stamped stream handler on the root logger. Call once at startup."""
    handler = logging.StreamHandler()
    handler.setFormatter(UTCFormatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logging.basicConfig(level=level, handlers=[handler])
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
