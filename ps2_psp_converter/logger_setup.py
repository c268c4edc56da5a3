"""
Logging setup module for the PS2 → PSP converter.

Configures Python's standard logging based on application configuration.
Supports console and rotating file logging.
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

def setup_logging(config: Dict[str, Any], level_override: Optional[str] = None):
    """
    Configures logging based on the provided configuration dictionary.

    Sets up logging level, format, console handler, and optional file handler.

    Args:
        config: The loaded configuration dictionary, expected to contain a 'logging' section.
        level_override: Level name from the command line; wins over the config value.
    """
    log_config = config.get('logging', {})
    log_level_str = (level_override or log_config.get('level', 'INFO')).upper()
    log_file_path = log_config.get('log_file')  # Already absolute from config_loader
    log_to_console = log_config.get('log_to_console', True)

    log_level = getattr(logging, log_level_str, logging.INFO)

    log_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates on repeated setup
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(log_format)
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)

    if log_file_path:
        try:
            log_dir = os.path.dirname(log_file_path)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)
                logger.info(f"Created log directory: {log_dir}")

            # Rotate logs at 5MB, keep 3 backups
            file_handler = RotatingFileHandler(
                log_file_path, maxBytes=5*1024*1024, backupCount=3, encoding='utf-8'
            )
            file_handler.setFormatter(log_format)
            file_handler.setLevel(log_level)
            root_logger.addHandler(file_handler)
            logger.info(f"File logging enabled at level {log_level_str} to {log_file_path}.")
        except OSError as e:
            # A broken log file must not stop the conversion
            logger.error(f"Failed to configure file logging to {log_file_path}: {e}", exc_info=True)

    # The SDK and its transport are chatty at INFO
    library_level = log_level if log_level <= logging.DEBUG else logging.WARNING
    for name in ("openai", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(library_level)

    logger.debug("Logging setup complete.")
