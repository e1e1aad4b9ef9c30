"""Logging configuration for ecs-deploy.

Console logging only; the command runs as a single CI/CD step and its
output is captured by the pipeline runner.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy at DEBUG/INFO
NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for the command-line tool.

    Args:
        verbose: Enable DEBUG output, including AWS SDK loggers
        quiet: Only show errors
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    third_party_level = logging.DEBUG if verbose else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    root_logger.debug(f"Logging initialized - level: {logging.getLevelName(level)}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name.

    Args:
        name: Logger name (e.g., "ecs_deploy.deploy.driver")

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
