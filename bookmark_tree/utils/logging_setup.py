"""
Logging configuration for the bookmark tree toolkit.

This module sets up logging based on configuration settings. Library
modules only create loggers; handlers are installed here, by the CLI.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config=None, log_file: Optional[str] = None) -> Optional[Path]:
    """
    Set up logging configuration.

    Args:
        config: LoggingConfig instance (defaults are used when None)
        log_file: Optional log file path override

    Returns:
        Path of the log file in use, or None when logging only to the console
    """
    log_level = "INFO"
    console_output = True

    if config is not None:
        log_level = config.level
        console_output = config.console_output
        if log_file is None and config.log_file:
            log_file = config.log_file

    handlers: List[logging.Handler] = []
    log_path = None

    if log_file is not None:
        # Create logs directory next to the working directory
        log_dir = Path.cwd() / "logs"
        log_dir.mkdir(exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = log_dir / f"{Path(log_file).stem}_{timestamp}.log"

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(file_handler)

    if console_output or not handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handlers.append(console_handler)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()), handlers=handlers, force=True
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured - level: {log_level}, file: {log_path}")

    # Reduce noise from parsing libraries
    logging.getLogger("bs4").setLevel(logging.WARNING)
    logging.getLogger("html5lib").setLevel(logging.WARNING)
    logging.getLogger("chardet").setLevel(logging.WARNING)

    return log_path
