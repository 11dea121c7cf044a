"""
Logging Setup
^^^^^^^^^^^^^
Provides a setup_logger function that configures logging for an application
using the `logger.cfg` file shipped with this package.

Library modules only ever call `logging.getLogger(__name__)`; configuring
handlers is left to the application.
"""
import configparser
import logging
import logging.config
import os

LOGGER_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "logger.cfg"
)


def setup_logger(name: str = "ethereum_signing") -> logging.Logger:
    """
    Set up a logger with the provided name using the `logger.cfg` file.
    """
    config = configparser.ConfigParser()
    config.read(LOGGER_CONFIG_PATH)
    logging.config.fileConfig(config, disable_existing_loggers=False)

    logger = logging.getLogger(name)

    return logger
