import logging
import os
import sys


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = None) -> logging.Logger:
    """
    Configure root logging once for the process.

    Level comes from the argument, else LOG_LEVEL, else INFO.
    Returns the application logger.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not any(getattr(h, "_exit_readiness", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._exit_readiness = True
        root.addHandler(handler)
    root.setLevel(log_level)

    # Quiet chatty client libraries
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    return logging.getLogger("exit_readiness")
