"""Logger setup shared by the zebra package."""

import logging
import os

LOGGER_NAME = "zebra"

# Level for the package logger; ZEBRA_LOG_LEVEL=DEBUG shows per-clue output.
LOG_LEVEL = os.environ.get("ZEBRA_LOG_LEVEL", "INFO")


def get_logger(name: str = "") -> logging.Logger:
    """
    Return the package logger (or a child of it).

    The first call installs a stream handler on the root "zebra" logger;
    later calls reuse it.
    """
    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] [%(name)s] %(message)s")
        )
        root.addHandler(handler)
        root.setLevel(LOG_LEVEL.upper())

    return root.getChild(name) if name else root
