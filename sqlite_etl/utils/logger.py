# sqlite_etl/utils/logger.py
import os
import logging
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(
    logger_name: str = "sqlite_etl",
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return a logger with a console handler and an optional file handler.

    Module loggers under ``logger_name`` (``sqlite_etl.extract`` and friends)
    propagate to the handlers installed here.

    Args:
        logger_name: Name of the logger
        level: Logging level, as a number or a name such as "DEBUG" (default: INFO)
        log_dir: Directory for the log file; no file handler when omitted
        log_file: Optional specific log filename (default: {logger_name}.log)

    Returns:
        Configured logger instance
    """
    if isinstance(level, str):
        level_name = level.upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level_name}")

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False

    # Clear existing handlers to avoid duplicates when called more than once
    if logger.handlers:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        if log_file is None:
            log_file = f"{logger_name.lower().replace(' ', '_')}.log"
        log_path = os.path.join(log_dir, log_file)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.debug(f"Log file is being saved to: {os.path.abspath(log_path)}")

    return logger
