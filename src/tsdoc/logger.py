import logging
import sys
from typing import IO, Optional

import structlog

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.dev.ConsoleRenderer(),
    ],
)

# Records go through the "tsdoc" stdlib logger up to whatever the root logger
# is configured with; stdout stays reserved for JSON output.
_std_logger = logging.getLogger("tsdoc")
_std_logger.setLevel(logging.NOTSET)
_std_logger.propagate = True

logger: structlog.BoundLogger = structlog.get_logger("tsdoc")


def setup_logging(debug: bool, stream: Optional[IO[str]] = None) -> None:
    """
    Route log records to *stream* (stderr by default) at INFO, or DEBUG when
    *debug* is set. Existing root handlers only get their level adjusted.
    """
    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)
        # structlog renders the final message
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(level)
