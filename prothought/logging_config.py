"""
Logging configuration for prothought.

Quiet by default; --verbose (or PROTHOUGHT_VERBOSE=1) turns on debug output.
"""

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

OPS_LOG_FILENAME = "prothought-ops.log"


def configure_quiet_mode(quiet: bool = True):
    """
    Configure logging to suppress verbose library output.

    Silences urllib3 connection chatter and Python warnings.

    Args:
        quiet: If True, suppress verbose output. If False, show everything.
    """
    if quiet:
        warnings.filterwarnings("ignore")
        logging.getLogger("urllib3").setLevel(logging.ERROR)
        logging.getLogger("requests").setLevel(logging.ERROR)
    else:
        warnings.filterwarnings("default")
        logging.getLogger("urllib3").setLevel(logging.NOTSET)
        logging.getLogger("requests").setLevel(logging.NOTSET)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    configure_quiet_mode(quiet=False)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Add stderr handler if not already present
    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    for name in ("prothought", "urllib3"):
        logging.getLogger(name).setLevel(logging.DEBUG)


def configure_ops_log(db_path) -> RotatingFileHandler:
    """Configure a persistent operations log beside the journal database.

    Writes to prothought-ops.log using a rotating file handler
    (1MB max, 3 backups). Always active regardless of --verbose.
    Returns the handler so it can be removed on close().
    """
    log_path = Path(db_path).parent / OPS_LOG_FILENAME
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    pt_logger = logging.getLogger("prothought")
    pt_logger.addHandler(handler)
    # Let INFO through even in quiet mode
    if pt_logger.level == logging.NOTSET or pt_logger.level > logging.INFO:
        pt_logger.setLevel(logging.INFO)

    return handler


def remove_ops_log(handler: RotatingFileHandler) -> None:
    """Detach and close a handler returned by configure_ops_log."""
    logging.getLogger("prothought").removeHandler(handler)
    handler.close()
