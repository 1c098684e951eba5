"""
Logging Configuration
Sets up the package logger. Modules log through
``logging.getLogger(__name__)``; nothing is installed on import.
"""
import logging
import sys


def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure the 'tripsparse' logger.

    Parameters
    ----------
    level : int
        Logging level (e.g. logging.DEBUG to trace every operation).
    log_file : str, optional
        Path of a file that also receives the records.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    logger = logging.getLogger("tripsparse")
    logger.setLevel(level)

    # Repeated calls replace handlers instead of stacking them
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
