import logging
import sys
from typing import Union


def setup_logger(name: str = "hmpi", level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Sets up a logger that writes to the console (stdout).

    Only entry points call this; library modules just use
    logging.getLogger(__name__) and inherit from the "hmpi" logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Avoid duplicate logs if setup is called multiple times
    if logger.hasHandlers():
        return logger

    # Format: timestamp - component - level - message
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    return logger
