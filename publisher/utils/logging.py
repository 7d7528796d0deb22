import logging
import os
import threading

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# services are created inside build worker threads
_setup_lock = threading.Lock()


def setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    with _setup_lock:
        logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(FORMAT))
            logger.addHandler(handler)
            logger.propagate = False
    return logger
