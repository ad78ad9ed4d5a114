"""Centralized logging configuration for recordcopy.

All modules log under the 'recordcopy' logger namespace. The library never
installs handlers on import; applications opt in with configure_logging().

Example:
    >>> import logging
    >>> from recordcopy.core.logging_config import configure_logging, get_logger
    >>>
    >>> configure_logging(level=logging.DEBUG)
    >>> get_logger("cloning").debug("copy started")
"""

import logging

# The standard logger name used throughout recordcopy
LOGGER_NAME = "recordcopy"

# Default logging format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a recordcopy logger.

    Args:
        name: Optional sub-logger name. If provided, returns a child logger
              under the recordcopy namespace (e.g., 'recordcopy.cloning').
              If None, returns the main recordcopy logger.

    Returns:
        The logger instance.
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(
    level: int = logging.WARNING,
    format_string: str = DEFAULT_FORMAT,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Configure the recordcopy logger.

    Args:
        level: Log level for the recordcopy logger. Defaults to WARNING.
        format_string: Format string for log messages.
        handler: Optional handler to add to the logger. If None, uses a
                StreamHandler with the specified format.

    Returns:
        The configured recordcopy logger.
    """
    logger = get_logger()
    logger.setLevel(level)

    # Add handler if not already present
    if not logger.handlers:
        if handler is None:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(handler)

    return logger
