"""
Centralized logging configuration for the search term optimizer.

Usage:
    from searchterm_optimizer.logging_config import setup_logging

    logger = setup_logging(__name__)
    logger.info("Batch classified")
    logger.warning("Parameter outside recommended range")
    logger.error("Config rejected")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = "logs"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    module_name: str,
    log_level: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
) -> logging.Logger:
    """
    Set up logging for a module with file and console output.

    Args:
        module_name: Name of the module (use __name__)
        log_level: DEBUG, INFO, WARNING or ERROR. Falls back to STO_LOG_LEVEL, then INFO.
        log_dir: Directory for log files. Falls back to STO_LOG_DIR, then logs/.
        console_output: Whether to also log to stderr

    Returns:
        Configured logger instance

    Log Levels:
        DEBUG: Per-record rule firing
        INFO: Batch runs, report writes
        WARNING: Advisory parameter ranges, skipped rows, failing rules
        ERROR: Invalid configs, missing input files

    Log Files:
        Format: {log_dir}/{module}_{date}.log
        Example: logs/engine_2026-10-19.log
    """
    from .settings import get_settings

    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    # Prevent duplicate handlers if setup_logging called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = Path(log_dir or settings.log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    today = datetime.now().strftime("%Y-%m-%d")
    simple_module = module_name.split(".")[-1]
    log_file = log_path / f"{simple_module}_{today}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # Handlers live on the module logger; don't double-print through root
    logger.propagate = False

    return logger

