import logging
import sys
from spektra.config import settings # Use absolute import

PACKAGE_LOGGER = 'spektra'

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

log_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(log_formatter)


def _resolve_level(level_name):
    return LOG_LEVEL_MAP.get(str(level_name).upper(), logging.INFO)


def _package_logger():
    """The 'spektra' logger owns the only handler; module loggers propagate to it."""
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        root.addHandler(console_handler)
        root.setLevel(_resolve_level(getattr(settings, 'LOGGING_LEVEL', 'INFO')))
        root.propagate = False
    return root


def set_log_level(level_name):
    """Change the level for every spektra logger at once."""
    _package_logger().setLevel(_resolve_level(level_name))


def get_logger(name):
    """
    Gets a logger instance configured with the application's settings.
    """
    _package_logger()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
