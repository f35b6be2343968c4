import logging
import sys
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter(LOG_FORMAT))

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the license client service.

    Safe to call more than once; the handler is only installed the first time.
    """
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if _handler not in root.handlers:
        root.addHandler(_handler)

    # Per-request lines from httpx are noise next to the attempt log
    logging.getLogger("httpx").setLevel(logging.WARNING)
