import logging
import sys

FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"

def configure_logging(level: str = "INFO"):
    """Attach a stdout handler to the package logger once."""
    log = logging.getLogger("storefront")
    log.setLevel(level.upper())
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(FORMAT))
        log.addHandler(handler)
    return log
