"""
Logging Configuration
Sets up the package logger for one simulation worker.
"""
import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None, rank: int = 0) -> None:
    """
    Configures the logger for the 'circlesim' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file. With several MPI
            ranks, each rank appends its rank number to the file name.
        rank: Worker rank, shown in every record.
    """
    logger = logging.getLogger("circlesim")
    logger.setLevel(level)

    # Check if handlers already exist to avoid duplicate logs on repeated setup
    if logger.hasHandlers():
        logger.handlers.clear()

    # stderr, so progress lines on stdout stay machine-readable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    # Format: Time - Rank - Module - Level - Message
    formatter = logging.Formatter(
        f'%(asctime)s - [rank {rank}] - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        if rank:
            log_file = f"{log_file}.{rank}"
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
